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

"""Tests for single-file incremental updates."""

import asyncio
from pathlib import Path

from workspace_search.codebase.file_filter import FileFilter
from workspace_search.codebase.models import IndexState
from workspace_search.codebase.service import IndexService
from workspace_search.codebase.store import IndexStore
from workspace_search.codebase.symbol_extractor import SymbolExtractor
from workspace_search.codebase.updater import IncrementalUpdater, UpdateOutcome
from workspace_search.config import SearchSettings


def _updater(root: Path, settings: SearchSettings = None) -> IncrementalUpdater:
    settings = settings or SearchSettings()
    return IncrementalUpdater(root, IndexStore(), FileFilter(root, settings), SymbolExtractor())


class TestIncrementalUpdater:
    """Test IncrementalUpdater.update."""

    def test_new_file_is_added(self, workspace: Path):
        updater = _updater(workspace)

        outcome = updater.update(workspace / "a.py")

        assert outcome == UpdateOutcome.UPDATED
        record = updater.store.get(str((workspace / "a.py").resolve()))
        assert record.content == "def foo(): pass\n"
        assert [s.name for s in record.symbols] == ["foo"]

    def test_relative_path(self, workspace: Path):
        updater = _updater(workspace)

        assert updater.update("b.py") == UpdateOutcome.UPDATED
        assert str((workspace / "b.py").resolve()) in updater.store

    def test_modified_file_is_replaced(self, workspace: Path):
        updater = _updater(workspace)
        updater.update("a.py")
        (workspace / "a.py").write_text("def renamed(): pass\n", encoding="utf-8")

        updater.update("a.py")

        record = updater.store.get(str((workspace / "a.py").resolve()))
        assert [s.name for s in record.symbols] == ["renamed"]
        assert len(updater.store) == 1

    def test_deleted_file_is_removed(self, workspace: Path):
        """A file deleted since the last index leaves no stale entry."""
        updater = _updater(workspace)
        updater.update("a.py")
        (workspace / "a.py").unlink()

        assert updater.update("a.py") == UpdateOutcome.REMOVED
        assert updater.store.all() == []

    def test_file_now_failing_filter_is_removed(self, workspace: Path):
        settings = SearchSettings(max_file_size=100)
        updater = _updater(workspace, settings)
        updater.update("a.py")
        (workspace / "a.py").write_text("x = 1\n" * 50, encoding="utf-8")

        assert updater.update("a.py") == UpdateOutcome.REMOVED

    def test_ineligible_unknown_file_is_skipped(self, workspace: Path):
        (workspace / "logo.png").write_bytes(b"\x89PNG")
        updater = _updater(workspace)

        assert updater.update("logo.png") == UpdateOutcome.SKIPPED
        assert updater.update("never-existed.py") == UpdateOutcome.SKIPPED
        assert len(updater.store) == 0

    def test_repeated_updates_are_idempotent(self, workspace: Path):
        updater = _updater(workspace)
        updater.update("a.py")
        first = updater.store.get(str((workspace / "a.py").resolve()))
        updater.update("a.py")
        second = updater.store.get(str((workspace / "a.py").resolve()))

        assert (first.content, first.symbols) == (second.content, second.symbols)


class TestServiceUpdate:
    """Test updates through IndexService."""

    def test_deleted_file_disappears_from_search(self, workspace: Path, settings: SearchSettings):
        service = IndexService(workspace, settings)
        asyncio.run(service.index_workspace())
        (workspace / "a.py").unlink()

        outcome = asyncio.run(service.update(workspace / "a.py"))

        assert outcome == UpdateOutcome.REMOVED
        assert asyncio.run(service.search("foo")) == []
        assert [Path(r.path).name for r in service.store.all()] == ["b.py"]
        assert service.state == IndexState.READY

    def test_update_does_not_write_snapshot(self, workspace: Path, settings: SearchSettings):
        service = IndexService(workspace, settings)
        asyncio.run(service.index_workspace())
        saved = service.snapshot_path.read_text(encoding="utf-8")
        (workspace / "c.py").write_text("def baz(): pass\n", encoding="utf-8")

        asyncio.run(service.update("c.py"))

        assert service.snapshot_path.read_text(encoding="utf-8") == saved
        assert service.is_dirty
        assert len(asyncio.run(service.search("baz"))) == 1

    def test_flush_writes_pending_updates(self, workspace: Path, settings: SearchSettings):
        service = IndexService(workspace, settings)
        asyncio.run(service.index_workspace())
        (workspace / "c.py").write_text("def baz(): pass\n", encoding="utf-8")
        asyncio.run(service.update("c.py"))

        assert service.flush() is True
        assert service.flush() is False

        reloaded = IndexService(workspace, settings)
        assert reloaded.load_cache() is True
        assert len(reloaded.keyword_search("baz")) == 1

    def test_skipped_update_leaves_state_clean(self, workspace: Path, settings: SearchSettings):
        service = IndexService(workspace, settings)
        asyncio.run(service.index_workspace())

        outcome = asyncio.run(service.update("missing.py"))

        assert outcome == UpdateOutcome.SKIPPED
        assert service.is_dirty is False

    def test_teardown_flushes(self, workspace: Path, settings: SearchSettings):
        service = IndexService(workspace, settings)
        asyncio.run(service.index_workspace())
        (workspace / "b.py").unlink()
        asyncio.run(service.update("b.py"))

        service.teardown()

        reloaded = IndexService(workspace, settings)
        reloaded.load_cache()
        assert [Path(r.path).name for r in reloaded.store.all()] == ["a.py"]

    def test_update_during_save_stays_pending(self, workspace: Path, settings: SearchSettings):
        """An update landing while the snapshot is written is not lost by the next flush."""
        service = IndexService(workspace, settings)
        real_save = service._persistence.save

        async def run():
            loop = asyncio.get_running_loop()

            def save_with_concurrent_update(snapshot, path=None):
                service._persistence.save = real_save
                (workspace / "c.py").write_text("def baz(): pass\n", encoding="utf-8")
                asyncio.run_coroutine_threadsafe(
                    service.update(workspace / "c.py"), loop
                ).result(timeout=5)
                return real_save(snapshot, path)

            service._persistence.save = save_with_concurrent_update
            return await service.index_workspace()

        stats = asyncio.run(run())

        assert stats.persisted is True
        assert len(service.keyword_search("baz")) == 1
        assert service.is_dirty

        assert service.flush() is True
        assert service.is_dirty is False
        reloaded = IndexService(workspace, settings)
        assert reloaded.load_cache() is True
        assert len(reloaded.keyword_search("baz")) == 1
