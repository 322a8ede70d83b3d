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

"""Index service for one workspace.

The service owns the index store of a single workspace root and is the
only writer to it. Full rebuilds and single-file updates are serialized by
one write lock; searches read point-in-time copies of the store and never
wait for a writer.

Lifecycle:
    service = IndexService(root)
    await service.initialize()      # load snapshot or build the index
    results = await service.search("parse config")
    service.teardown()              # stop watching, flush pending updates

A full pass clears the store, then crawls the workspace in batches. Each
batch is read and parsed in a worker thread while holding the write lock,
and the pass may be cancelled between batches; the partially built store
is kept. A completed pass is written through to the snapshot.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from workspace_search.codebase.crawler import Crawler
from workspace_search.codebase.file_filter import FileFilter
from workspace_search.codebase.indexer import build_records
from workspace_search.codebase.models import FileRecord, IndexState, IndexStats, SearchResult
from workspace_search.codebase.persistence import SnapshotPersistence, build_snapshot
from workspace_search.codebase.query_engine import QueryEngine
from workspace_search.codebase.query_expander import QueryExpander
from workspace_search.codebase.store import IndexStore
from workspace_search.codebase.symbol_extractor import SymbolExtractor
from workspace_search.codebase.updater import IncrementalUpdater, UpdateOutcome
from workspace_search.codebase.watcher import WorkspaceFileHandler, WorkspaceWatcher
from workspace_search.config import SearchSettings
from workspace_search.errors import InvalidWorkspaceError, SnapshotWriteError

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 100


def _validate_root(root: Path) -> Path:
    if not root.exists():
        raise InvalidWorkspaceError(root, "does not exist")
    if not root.is_dir():
        raise InvalidWorkspaceError(root, "not a directory")
    return root


class IndexService:
    """Indexes and searches one workspace.

    Raises:
        InvalidWorkspaceError: The workspace root is missing or not a directory
    """

    def __init__(
        self,
        workspace_root: Union[str, Path],
        settings: Optional[SearchSettings] = None,
        expander: Optional[QueryExpander] = None,
    ):
        self.root = _validate_root(Path(workspace_root).expanduser().resolve())
        self.settings = settings or SearchSettings()

        self._store = IndexStore()
        self._file_filter = FileFilter(self.root, self.settings)
        self._extractor = SymbolExtractor()
        self._updater = IncrementalUpdater(
            self.root, self._store, self._file_filter, self._extractor
        )
        self._persistence = SnapshotPersistence(
            self.root, self.settings.cache_dir, retries=self.settings.save_retries
        )
        self._engine = QueryEngine(self._store, self.settings, expander)

        self._write_lock = asyncio.Lock()
        self._rebuild_lock = asyncio.Lock()
        self._cancel_requested = False
        self._state = IndexState.EMPTY
        # Store mutations so far, and how many of them the snapshot holds
        self._changes = 0
        self._saved_changes = 0
        self._last_indexed: Optional[float] = None

        self._watcher: Optional[WorkspaceWatcher] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def state(self) -> IndexState:
        return self._state

    @property
    def store(self) -> IndexStore:
        return self._store

    @property
    def expander(self) -> Optional[QueryExpander]:
        return self._engine.expander

    @expander.setter
    def expander(self, expander: Optional[QueryExpander]) -> None:
        self._engine.expander = expander

    @property
    def snapshot_path(self) -> Path:
        return self._persistence.path

    @property
    def is_dirty(self) -> bool:
        return self._changes != self._saved_changes

    @property
    def is_watching(self) -> bool:
        return self._watcher is not None and self._watcher.is_running

    async def initialize(self) -> None:
        """Load the cached index, or build it when there is none."""
        loaded = await asyncio.to_thread(self.load_cache)
        if not loaded and self.settings.index_on_startup:
            await self.index_workspace()
        if self.settings.enable_watcher:
            self.start_watching()

    # ------------------------------------------------------------------
    # Full index pass
    # ------------------------------------------------------------------

    def _index_batch(self, batch: List[Path]) -> List[FileRecord]:
        records = build_records(batch, self._extractor)
        self._store.put_many(records)
        return records

    async def index_workspace(self) -> IndexStats:
        """Rebuild the index from scratch.

        Only one rebuild runs at a time; a second call waits for the first
        to finish and then rebuilds again.

        Returns:
            Statistics of the pass. A snapshot write failure is reported in
            ``persist_error`` rather than raised.

        Raises:
            InvalidWorkspaceError: The workspace root has disappeared
        """
        _validate_root(self.root)

        async with self._rebuild_lock:
            self._cancel_requested = False
            self._state = IndexState.INDEXING
            stats = IndexStats()
            start = time.perf_counter()
            crawler = Crawler(
                self.root,
                self._file_filter,
                batch_size=self.settings.batch_size,
                max_depth=self.settings.max_depth,
            )
            logger.info(f"Indexing workspace {self.root}")

            try:
                async with self._write_lock:
                    self._store.clear()
                    self._changes += 1

                async for batch in crawler.batches():
                    if self._cancel_requested:
                        stats.cancelled = True
                        break

                    async with self._write_lock:
                        records = await asyncio.to_thread(self._index_batch, batch)
                        self._changes += 1

                    previous = stats.files_indexed
                    stats.files_indexed += len(records)
                    stats.files_skipped += len(batch) - len(records)
                    stats.symbols_extracted += sum(len(r.symbols) for r in records)
                    if stats.files_indexed // PROGRESS_INTERVAL > previous // PROGRESS_INTERVAL:
                        logger.info(f"Indexed {stats.files_indexed} files...")
            finally:
                self._state = IndexState.READY
                self._last_indexed = time.time()
                self._cancel_requested = False

            stats.files_discovered = crawler.stats.discovered
            stats.files_skipped += crawler.stats.skipped
            stats.duration_ms = (time.perf_counter() - start) * 1000

            if stats.cancelled:
                logger.info(
                    f"Indexing cancelled after {stats.files_indexed} files "
                    f"with {stats.symbols_extracted} symbols"
                )
                return stats

            logger.info(
                f"Indexed {stats.files_indexed} files with {stats.symbols_extracted} symbols "
                f"in {stats.duration_ms:.0f}ms"
            )

            try:
                await asyncio.to_thread(self.save)
                stats.persisted = True
            except SnapshotWriteError as e:
                stats.persist_error = str(e)
                logger.warning(f"Index is usable but was not saved: {e}")

            return stats

    def cancel_indexing(self) -> bool:
        """Stop the running full pass after its current batch.

        Returns:
            True if a pass was running
        """
        if self._state != IndexState.INDEXING:
            return False
        self._cancel_requested = True
        logger.debug("Index cancellation requested")
        return True

    # ------------------------------------------------------------------
    # Incremental updates
    # ------------------------------------------------------------------

    async def update(self, path: Union[str, Path]) -> UpdateOutcome:
        """Re-index a single file, or evict it if it no longer qualifies.

        The snapshot is not written; call :meth:`flush` or :meth:`save`.
        """
        async with self._write_lock:
            previous_state = self._state
            if previous_state == IndexState.READY:
                self._state = IndexState.UPDATING
            try:
                outcome = await asyncio.to_thread(self._updater.update, path)
                if outcome != UpdateOutcome.SKIPPED:
                    self._changes += 1
            finally:
                if self._state == IndexState.UPDATING:
                    self._state = previous_state

        return outcome

    def start_watching(self) -> None:
        """Watch the workspace and feed changes to :meth:`update`.

        Must be called from the event loop that runs this service.
        """
        if self.is_watching:
            return
        self._loop = asyncio.get_running_loop()

        def _should_process(path: str) -> bool:
            return not self._file_filter.is_excluded(Path(path))

        handler = WorkspaceFileHandler(self._on_file_change, should_process=_should_process)
        self._watcher = WorkspaceWatcher(self.root, handler)
        self._watcher.start()

    def stop_watching(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

    def _on_file_change(self, path: str) -> None:
        """Called from the watcher thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        future = asyncio.run_coroutine_threadsafe(self.update(path), loop)
        future.add_done_callback(self._log_update_failure)

    @staticmethod
    def _log_update_failure(future: "asyncio.Future[Any]") -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Incremental update failed: {error}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str,
        max_results: Optional[int] = None,
        use_expansion: bool = False,
    ) -> List[SearchResult]:
        return await self._engine.search(query, max_results, use_expansion)

    def keyword_search(self, query: str, max_results: Optional[int] = None) -> List[SearchResult]:
        return self._engine.keyword_search(query, max_results)

    async def find_definition(self, name: str) -> Optional[SearchResult]:
        return await self._engine.find_definition(name)

    async def find_references(
        self, name: str, max_results: Optional[int] = None
    ) -> List[SearchResult]:
        return await self._engine.find_references(name, max_results)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "files": len(self._store),
            "symbols": self._store.symbol_count(),
            "last_indexed": self._last_indexed,
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load_cache(self) -> bool:
        """Replace the store with the saved snapshot of this workspace.

        Returns:
            False if there is no usable snapshot; the store is then untouched
        """
        snapshot = self._persistence.load()
        if snapshot is None:
            logger.debug(f"No usable snapshot for {self.root}")
            return False

        self._store.replace_all(snapshot.records)
        self._last_indexed = snapshot.indexed_at
        self._state = IndexState.READY
        self._saved_changes = self._changes
        logger.info(f"Loaded {len(snapshot.records)} files from index cache")
        return True

    def save(self) -> Path:
        """Write the current store to the snapshot.

        Raises:
            SnapshotWriteError: Writing failed after all retries
        """
        changes = self._changes
        snapshot = build_snapshot(self.root, self._store.as_dict())
        path = self._persistence.save(snapshot)
        # Changes made while writing stay pending for the next flush
        self._saved_changes = max(self._saved_changes, changes)
        return path

    def flush(self) -> bool:
        """Save only if the store changed since the last save or load."""
        if not self.is_dirty:
            return False
        self.save()
        return True

    def teardown(self) -> None:
        """Stop watching and flush pending updates.

        Raises:
            SnapshotWriteError: The final flush failed
        """
        self.stop_watching()
        self.flush()
        self._loop = None
