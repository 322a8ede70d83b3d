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

"""Single-file re-indexing.

The updater replaces or removes exactly one store entry. It never writes
the snapshot; the owner decides when to flush.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Union

from workspace_search.codebase.file_filter import FileFilter
from workspace_search.codebase.indexer import build_record
from workspace_search.codebase.store import IndexStore
from workspace_search.codebase.symbol_extractor import SymbolExtractor

logger = logging.getLogger(__name__)


class UpdateOutcome(str, Enum):
    """What a single-file update did to the store."""

    UPDATED = "updated"  # record added or replaced
    REMOVED = "removed"  # stale record evicted
    SKIPPED = "skipped"  # ineligible and not indexed; nothing to do


class IncrementalUpdater:
    """Re-index single files on change notification.

    Repeating an update for the same path is harmless, so notifications may
    arrive in any order and any number of times.
    """

    def __init__(
        self,
        root: Path,
        store: IndexStore,
        file_filter: FileFilter,
        extractor: SymbolExtractor,
    ):
        self.root = Path(root).resolve()
        self.store = store
        self.file_filter = file_filter
        self.extractor = extractor

    def resolve(self, path: Union[str, Path]) -> Path:
        """Absolute, normalized form of ``path`` (relative paths are under the root)."""
        path = Path(path)
        if not path.is_absolute():
            path = self.root / path
        return Path(os.path.abspath(path))

    def update(self, path: Union[str, Path]) -> UpdateOutcome:
        """Bring the store entry for one file in line with the disk.

        Args:
            path: Changed file, absolute or relative to the workspace root

        Returns:
            The outcome for the store
        """
        resolved = self.resolve(path)
        key = str(resolved)

        if self.file_filter.eligible(resolved):
            record = build_record(resolved, self.extractor)
            if record is not None:
                self.store.put(key, record)
                logger.debug(f"Re-indexed {key} ({len(record.symbols)} symbols)")
                return UpdateOutcome.UPDATED

        if self.store.remove(key):
            logger.debug(f"Removed {key} from index")
            return UpdateOutcome.REMOVED
        return UpdateOutcome.SKIPPED
