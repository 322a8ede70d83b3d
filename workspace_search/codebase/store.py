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

"""In-memory index store."""

import threading
from typing import Dict, Iterable, List, Mapping, Optional

from workspace_search.codebase.models import FileRecord


class IndexStore:
    """Mapping from absolute file path to its :class:`FileRecord`.

    Every operation holds an internal lock, so a reader on another thread
    sees the store either before or after a mutation, never during one.
    Read methods return copies; callers can iterate them while the store
    keeps changing.
    """

    def __init__(self) -> None:
        self._records: Dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    def put(self, path: str, record: FileRecord) -> None:
        with self._lock:
            self._records[path] = record

    def put_many(self, records: Iterable[FileRecord]) -> None:
        with self._lock:
            for record in records:
                self._records[record.path] = record

    def get(self, path: str) -> Optional[FileRecord]:
        with self._lock:
            return self._records.get(path)

    def remove(self, path: str) -> bool:
        """Remove a record; returns True if one was present."""
        with self._lock:
            return self._records.pop(path, None) is not None

    def all(self) -> List[FileRecord]:
        """Point-in-time list of all records (order unspecified)."""
        with self._lock:
            return list(self._records.values())

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def replace_all(self, records: Mapping[str, FileRecord]) -> None:
        """Swap in a complete set of records, e.g. from a loaded snapshot."""
        new_records = dict(records)
        with self._lock:
            self._records = new_records

    def as_dict(self) -> Dict[str, FileRecord]:
        with self._lock:
            return dict(self._records)

    def symbol_count(self) -> int:
        with self._lock:
            return sum(len(record.symbols) for record in self._records.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._records
