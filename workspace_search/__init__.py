# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Workspace code search.

Crawls a project, extracts named symbols with tree-sitter, keeps an
in-memory index with an on-disk cache, and answers keyword queries with
ranked, line-located results.

Package Structure:
    config.py                 - SearchSettings (pydantic, YAML overrides)
    errors.py                 - Caller-visible exceptions
    cli.py                    - workspace-search command line
    languages/                - Language tags and per-language symbol queries
    codebase/                 - Crawler, extractor, store, persistence, search

Usage:
    from workspace_search import IndexService

    service = IndexService("/path/to/project")
    await service.initialize()
    results = await service.search("load config")
"""

from workspace_search.codebase.service import IndexService
from workspace_search.config import SearchSettings
from workspace_search.errors import (
    InvalidWorkspaceError,
    SnapshotWriteError,
    WorkspaceSearchError,
)

__version__ = "0.1.0"

__all__ = [
    "IndexService",
    "SearchSettings",
    "InvalidWorkspaceError",
    "SnapshotWriteError",
    "WorkspaceSearchError",
]
