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

"""Tests for debounced filesystem change notifications."""

import asyncio
import threading
import time
from pathlib import Path

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from workspace_search.codebase.service import IndexService
from workspace_search.codebase.watcher import WorkspaceFileHandler
from workspace_search.config import SearchSettings


class Recorder:
    """Collects callback paths and signals when the expected count arrives."""

    def __init__(self, expected: int):
        self.paths = []
        self.expected = expected
        self.done = threading.Event()

    def __call__(self, path: str) -> None:
        self.paths.append(path)
        if len(self.paths) >= self.expected:
            self.done.set()


class TestWorkspaceFileHandler:
    """Test WorkspaceFileHandler debouncing."""

    def test_burst_is_reported_once_per_path(self):
        recorder = Recorder(expected=2)
        handler = WorkspaceFileHandler(recorder, debounce_delay=0.05)

        handler.on_modified(FileModifiedEvent("/ws/a.py"))
        handler.on_modified(FileModifiedEvent("/ws/a.py"))
        handler.on_created(FileCreatedEvent("/ws/b.py"))

        assert recorder.done.wait(timeout=5)
        time.sleep(0.1)
        assert sorted(recorder.paths) == ["/ws/a.py", "/ws/b.py"]

    def test_directory_events_ignored(self):
        recorder = Recorder(expected=1)
        handler = WorkspaceFileHandler(recorder, debounce_delay=0.05)

        handler.on_modified(DirModifiedEvent("/ws/src"))
        handler.on_deleted(FileDeletedEvent("/ws/a.py"))

        assert recorder.done.wait(timeout=5)
        assert recorder.paths == ["/ws/a.py"]

    def test_move_reports_both_paths(self):
        recorder = Recorder(expected=2)
        handler = WorkspaceFileHandler(recorder, debounce_delay=0.05)

        handler.on_moved(FileMovedEvent("/ws/old.py", "/ws/new.py"))

        assert recorder.done.wait(timeout=5)
        assert sorted(recorder.paths) == ["/ws/new.py", "/ws/old.py"]

    def test_should_process_filter(self):
        recorder = Recorder(expected=1)
        handler = WorkspaceFileHandler(
            recorder,
            should_process=lambda path: "node_modules" not in path,
            debounce_delay=0.05,
        )

        handler.on_modified(FileModifiedEvent("/ws/node_modules/x.js"))
        handler.on_modified(FileModifiedEvent("/ws/a.py"))

        assert recorder.done.wait(timeout=5)
        assert recorder.paths == ["/ws/a.py"]

    def test_callback_errors_do_not_stop_notifications(self):
        seen = []
        done = threading.Event()

        def on_change(path):
            seen.append(path)
            if len(seen) == 2:
                done.set()
            raise RuntimeError("boom")

        handler = WorkspaceFileHandler(on_change, debounce_delay=0.05)
        handler.on_modified(FileModifiedEvent("/ws/a.py"))
        handler.on_modified(FileModifiedEvent("/ws/b.py"))

        assert done.wait(timeout=5)
        assert sorted(seen) == ["/ws/a.py", "/ws/b.py"]

    def test_cancel_drops_pending(self):
        recorder = Recorder(expected=1)
        handler = WorkspaceFileHandler(recorder, debounce_delay=0.2)

        handler.on_modified(FileModifiedEvent("/ws/a.py"))
        handler.cancel()

        assert not recorder.done.wait(timeout=0.5)


class TestServiceWatching:
    """Test watcher wiring in IndexService."""

    def test_start_and_stop(self, workspace: Path, settings: SearchSettings):
        service = IndexService(workspace, settings)

        async def run():
            service.start_watching()
            running = service.is_watching
            service.stop_watching()
            return running

        assert asyncio.run(run()) is True
        assert service.is_watching is False

    def test_change_callback_updates_index(self, workspace: Path, settings: SearchSettings):
        """A change notification from another thread runs update on the loop."""
        service = IndexService(workspace, settings)

        async def run():
            await service.index_workspace()
            service.start_watching()
            try:
                (workspace / "a.py").unlink()
                await asyncio.to_thread(
                    service._on_file_change, str((workspace / "a.py").resolve())
                )
                for _ in range(100):
                    if len(service.store) == 1:
                        break
                    await asyncio.sleep(0.02)
            finally:
                service.stop_watching()

        asyncio.run(run())

        assert [Path(r.path).name for r in service.store.all()] == ["b.py"]
