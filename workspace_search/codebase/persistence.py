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

"""On-disk snapshot of the index store.

One JSON document per workspace, stored under
``<cache_dir>/<sha256(root)[:16]>/index.json``:

```json
{"version": 1, "indexedAt": 1718000000.0, "workspaceRoot": "/abs/root",
 "records": {"/abs/root/a.py": {"path": "...", "content": "...", "symbols": [...],
             "size": 15, "modifiedAt": 1718000000.0, "indexedAt": 1718000000.0}}}
```

A snapshot is only trusted when its version is known and its workspace
root equals the current root exactly. Every other outcome of ``load`` is
"no snapshot", and the caller rebuilds.
"""

import hashlib
import json
import logging
import tempfile
import time
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from workspace_search.codebase.models import SNAPSHOT_VERSION, FileRecord, IndexSnapshot
from workspace_search.errors import SnapshotWriteError

logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "index.json"


def workspace_key(root: Path) -> str:
    """Stable identifier for a workspace root."""
    return hashlib.sha256(str(Path(root).resolve()).encode("utf-8")).hexdigest()[:16]


def snapshot_path_for(root: Path, cache_dir: Path) -> Path:
    return Path(cache_dir) / workspace_key(root) / SNAPSHOT_FILENAME


def build_snapshot(root: Path, records: Dict[str, FileRecord]) -> IndexSnapshot:
    return IndexSnapshot(
        version=SNAPSHOT_VERSION,
        indexed_at=time.time(),
        workspace_root=str(Path(root).resolve()),
        records=records,
    )


class SnapshotPersistence:
    """Reads and writes the snapshot of one workspace."""

    def __init__(
        self,
        workspace_root: Path,
        cache_dir: Path,
        retries: int = 3,
        retry_delay: float = 0.05,
    ):
        self.workspace_root = str(Path(workspace_root).resolve())
        self.path = snapshot_path_for(Path(workspace_root), Path(cache_dir))
        self.retries = max(1, retries)
        self.retry_delay = retry_delay

    def save(self, snapshot: IndexSnapshot, path: Optional[Path] = None) -> Path:
        """Write a snapshot atomically.

        The document is written to a uniquely named temporary file next to
        the target, which then replaces the target. An interrupted write
        never leaves a truncated snapshot behind, and concurrent saves never
        share a temporary file.

        Args:
            snapshot: Snapshot to write
            path: Target file (defaults to this workspace's snapshot path)

        Returns:
            The path written

        Raises:
            SnapshotWriteError: All attempts failed
        """
        target = Path(path) if path is not None else self.path
        payload = snapshot.model_dump_json(by_alias=True)
        last_error: Optional[OSError] = None

        for attempt in range(1, self.retries + 1):
            tmp: Optional[Path] = None
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                    mode="w",
                    encoding="utf-8",
                    dir=target.parent,
                    prefix=f"{target.name}.",
                    suffix=".tmp",
                    delete=False,
                ) as handle:
                    tmp = Path(handle.name)
                    handle.write(payload)
                tmp.replace(target)
                logger.debug(f"Saved snapshot with {len(snapshot.records)} records to {target}")
                return target
            except OSError as e:
                last_error = e
                logger.debug(f"Snapshot write attempt {attempt}/{self.retries} failed: {e}")
                if tmp is not None:
                    tmp.unlink(missing_ok=True)
                if attempt < self.retries:
                    time.sleep(self.retry_delay)

        raise SnapshotWriteError(target, self.retries, last_error)

    def load(self, path: Optional[Path] = None) -> Optional[IndexSnapshot]:
        """Read and validate a snapshot.

        Args:
            path: Snapshot file (defaults to this workspace's snapshot path)

        Returns:
            The snapshot, or None if it is missing, corrupt, of an unknown
            version, or belongs to a different workspace root
        """
        source = Path(path) if path is not None else self.path
        try:
            text = source.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug(f"Cannot read snapshot {source}: {e}")
            return None

        try:
            data = json.loads(text)
        except ValueError as e:
            logger.warning(f"Ignoring corrupt snapshot {source}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring snapshot {source}: not a JSON object")
            return None

        if data.get("version") != SNAPSHOT_VERSION:
            logger.debug(f"Ignoring snapshot {source}: unsupported version {data.get('version')!r}")
            return None

        if data.get("workspaceRoot") != self.workspace_root:
            logger.debug(
                f"Ignoring snapshot {source}: workspace {data.get('workspaceRoot')!r} "
                f"does not match {self.workspace_root!r}"
            )
            return None

        try:
            return IndexSnapshot.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid snapshot {source}: {e}")
            return None

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
