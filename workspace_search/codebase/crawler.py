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

"""Workspace crawler.

Walks the workspace root and produces eligible file paths in batches.
Excluded directories are pruned during the walk so that large subtrees
such as ``.git`` or ``node_modules`` are never descended into; every file
that is reached still goes through :class:`FileFilter`.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Iterator, List

from workspace_search.codebase.file_filter import FileFilter
from workspace_search.codebase.ignore_patterns import matches_pattern, should_ignore_dir

logger = logging.getLogger(__name__)


@dataclass
class CrawlStats:
    """Counters for one crawl."""

    discovered: int = 0
    eligible: int = 0
    skipped: int = 0


class Crawler:
    """Single-use walk over a workspace.

    Each call to :meth:`iter_paths`, :meth:`iter_batches` or :meth:`batches`
    starts a fresh walk from the root and resets :attr:`stats`.
    """

    def __init__(
        self,
        root: Path,
        file_filter: FileFilter,
        batch_size: int = 10,
        max_depth: int = 10,
    ):
        self.root = Path(root).resolve()
        self.file_filter = file_filter
        self.batch_size = max(1, batch_size)
        self.max_depth = max_depth
        self.stats = CrawlStats()

    def _prune(self, rel_dir: Path, dirnames: List[str]) -> None:
        settings = self.file_filter.settings
        if len(rel_dir.parts) >= self.max_depth:
            dirnames[:] = []
            return

        kept = []
        for name in sorted(dirnames):
            if should_ignore_dir(name, settings.exclude_dirs):
                continue
            if any(matches_pattern(rel_dir / name, p) for p in settings.exclude_patterns):
                continue
            kept.append(name)
        dirnames[:] = kept

    def iter_paths(self) -> Iterator[Path]:
        """Yield every eligible file below the root in walk order."""
        self.stats = CrawlStats()

        def _on_error(err: OSError) -> None:
            logger.debug(f"Cannot list {err.filename}: {err}")

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_on_error):
            current = Path(dirpath)
            self._prune(current.relative_to(self.root), dirnames)

            for filename in sorted(filenames):
                path = current / filename
                self.stats.discovered += 1
                if self.file_filter.eligible(path):
                    self.stats.eligible += 1
                    yield path
                else:
                    self.stats.skipped += 1

    def iter_batches(self) -> Iterator[List[Path]]:
        """Yield eligible files in lists of at most ``batch_size`` paths."""
        batch: List[Path] = []
        for path in self.iter_paths():
            batch.append(path)
            if len(batch) >= self.batch_size:
                yield batch
                batch = []
        if batch:
            yield batch

    async def batches(self) -> AsyncIterator[List[Path]]:
        """Asynchronously yield batches, walking the tree in a worker thread.

        The event loop regains control between batches.
        """
        iterator = self.iter_batches()
        while True:
            batch = await asyncio.to_thread(next, iterator, None)
            if batch is None:
                return
            yield batch


def crawl(root: Path, file_filter: FileFilter) -> Iterator[Path]:
    """Convenience generator over all eligible files under ``root``."""
    settings = file_filter.settings
    crawler = Crawler(
        root, file_filter, batch_size=settings.batch_size, max_depth=settings.max_depth
    )
    return crawler.iter_paths()
