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

"""Index data model.

Persisted types (Symbol, FileRecord, IndexSnapshot) are pydantic models so
that a snapshot read back from disk is validated field by field. Query
results and statistics are plain dataclasses; they are never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

SNAPSHOT_VERSION = 1


class Symbol(BaseModel):
    """Named code entity extracted from one file.

    Symbols have no identity outside the record that produced them.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    kind: str  # function, class, method, interface (other tags pass through)
    line: int = Field(ge=1)  # 1-based line of the defining node


class FileRecord(BaseModel):
    """Indexed content and symbols of one file.

    Records are replaced wholesale on re-index, never patched.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str  # absolute path, unique key in the store
    content: str
    symbols: List[Symbol] = Field(default_factory=list)
    size: int
    modified_at: float = Field(alias="modifiedAt")
    indexed_at: float = Field(alias="indexedAt")


class IndexSnapshot(BaseModel):
    """Persisted form of the index store."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = SNAPSHOT_VERSION
    indexed_at: float = Field(alias="indexedAt")
    workspace_root: str = Field(alias="workspaceRoot")
    records: Dict[str, FileRecord] = Field(default_factory=dict)


@dataclass
class SearchResult:
    """One ranked search hit."""

    path: str
    line: int
    score: int
    preview: str
    symbols: List[Symbol] = field(default_factory=list)

    @property
    def key(self) -> tuple:
        return (self.path, self.line)


@dataclass
class IndexStats:
    """Outcome of a full index pass."""

    files_indexed: int = 0
    symbols_extracted: int = 0
    duration_ms: float = 0.0
    files_discovered: int = 0
    files_skipped: int = 0
    cancelled: bool = False
    persisted: bool = False
    persist_error: Optional[str] = None


class IndexState(str, Enum):
    """Lifecycle of the index store."""

    EMPTY = "empty"
    INDEXING = "indexing"
    READY = "ready"
    UPDATING = "updating"
