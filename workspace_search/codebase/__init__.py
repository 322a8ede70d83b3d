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

"""Crawling, indexing, persistence and search for one workspace."""

from workspace_search.codebase.models import (
    FileRecord,
    IndexSnapshot,
    IndexState,
    IndexStats,
    SearchResult,
    Symbol,
)
from workspace_search.codebase.query_expander import (
    LLMQueryExpander,
    OllamaCompletion,
    QueryExpander,
    StaticQueryExpander,
)
from workspace_search.codebase.service import IndexService
from workspace_search.codebase.updater import UpdateOutcome

__all__ = [
    "FileRecord",
    "IndexSnapshot",
    "IndexState",
    "IndexStats",
    "SearchResult",
    "Symbol",
    "LLMQueryExpander",
    "OllamaCompletion",
    "QueryExpander",
    "StaticQueryExpander",
    "IndexService",
    "UpdateOutcome",
]
