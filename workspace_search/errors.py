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

"""Caller-visible failures of the search engine.

Only failures the caller can act on are exceptions. Unreadable files,
oversized files, unsupported languages and parse errors are skipped as
ordinary control flow and never surface here.
"""

from pathlib import Path
from typing import Optional


class WorkspaceSearchError(Exception):
    """Base class for errors surfaced to callers of the index service."""


class InvalidWorkspaceError(WorkspaceSearchError):
    """The workspace root does not exist or is not a directory."""

    def __init__(self, root: Path, reason: str = "not a directory"):
        self.root = root
        self.reason = reason
        super().__init__(f"Invalid workspace root {root}: {reason}")


class SnapshotWriteError(WorkspaceSearchError):
    """Writing the on-disk snapshot failed after all retries.

    The in-memory index is unaffected and remains usable.
    """

    def __init__(self, path: Path, attempts: int, cause: Optional[BaseException] = None):
        self.path = path
        self.attempts = attempts
        self.cause = cause
        message = f"Failed to write index snapshot {path} after {attempts} attempt(s)"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
