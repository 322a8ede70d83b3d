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

"""Filesystem change notifications for incremental updates."""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional, Set

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class WorkspaceFileHandler(FileSystemEventHandler):
    """File system event handler for tracking workspace changes.

    Collects modified, created, deleted and moved paths and reports each of
    them once after a quiet period, so that a burst of saves to the same
    file triggers a single update.
    """

    def __init__(
        self,
        on_change: Callable[[str], None],
        should_process: Optional[Callable[[str], bool]] = None,
        debounce_delay: float = 0.5,
    ):
        """Initialize file handler.

        Args:
            on_change: Callback when a file changes (receives file path)
            should_process: Predicate deciding whether a path is reported
            debounce_delay: Quiet period in seconds before notifying
        """
        super().__init__()
        self.on_change = on_change
        self.should_process = should_process or (lambda path: True)
        self._debounce_lock = threading.Lock()
        self._pending_changes: Set[str] = set()
        self._debounce_timer: Optional[threading.Timer] = None
        self._debounce_delay = debounce_delay

    def _debounced_notify(self) -> None:
        """Notify of changes after debounce period."""
        with self._debounce_lock:
            changes = sorted(self._pending_changes)
            self._pending_changes.clear()
            self._debounce_timer = None

        for path in changes:
            try:
                self.on_change(path)
            except Exception as e:
                logger.warning(f"Error in file change callback: {e}")

    def _schedule_notification(self, path: str) -> None:
        """Schedule a debounced notification."""
        path = os.fsdecode(path)
        if not self.should_process(path):
            return

        with self._debounce_lock:
            self._pending_changes.add(path)

            if self._debounce_timer:
                self._debounce_timer.cancel()

            self._debounce_timer = threading.Timer(self._debounce_delay, self._debounced_notify)
            self._debounce_timer.daemon = True
            self._debounce_timer.start()

    def cancel(self) -> None:
        """Drop pending notifications."""
        with self._debounce_lock:
            if self._debounce_timer:
                self._debounce_timer.cancel()
                self._debounce_timer = None
            self._pending_changes.clear()

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule_notification(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule_notification(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule_notification(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # The old path must be evicted and the new one indexed
        if not event.is_directory:
            self._schedule_notification(event.src_path)
            self._schedule_notification(event.dest_path)


class WorkspaceWatcher:
    """Recursive watchdog observer over one workspace root."""

    def __init__(self, root: Path, handler: WorkspaceFileHandler):
        self.root = Path(root)
        self.handler = handler
        self._observer: Optional[Observer] = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(self.handler, str(self.root), recursive=True)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info(f"Watching {self.root} for changes")

    def stop(self, timeout: float = 2.0) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=timeout)
        self._observer = None
        self.handler.cancel()
        logger.debug(f"Stopped watching {self.root}")
