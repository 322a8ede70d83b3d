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

"""Turn eligible files into :class:`FileRecord` entries."""

import logging
import time
from pathlib import Path
from typing import Iterable, List, Optional

from workspace_search.codebase.models import FileRecord
from workspace_search.codebase.symbol_extractor import SymbolExtractor

logger = logging.getLogger(__name__)


def build_record(path: Path, extractor: SymbolExtractor) -> Optional[FileRecord]:
    """Read one file and extract its symbols.

    Args:
        path: Absolute path of a file that passed the file filter
        extractor: Symbol extractor (not shared across threads)

    Returns:
        The record, or None if the file vanished or could not be read
    """
    path = Path(path)
    try:
        stat = path.stat()
        raw = path.read_bytes()
    except OSError as e:
        logger.debug(f"Skipping {path}: {e}")
        return None

    language = extractor.detect_language(path)
    symbols = extractor.extract(raw, language) if language is not None else []

    return FileRecord(
        path=str(path),
        content=raw.decode("utf-8", errors="replace"),
        symbols=symbols,
        size=stat.st_size,
        modified_at=stat.st_mtime,
        indexed_at=time.time(),
    )


def build_records(paths: Iterable[Path], extractor: SymbolExtractor) -> List[FileRecord]:
    """Build records for a batch, dropping files that could not be read."""
    records = []
    for path in paths:
        record = build_record(path, extractor)
        if record is not None:
            records.append(record)
    return records
