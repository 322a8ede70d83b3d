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

"""Eligibility filter for indexing candidates."""

import logging
import os
from pathlib import Path, PurePath
from typing import Optional

from workspace_search.codebase.ignore_patterns import should_ignore_path
from workspace_search.config import SearchSettings

logger = logging.getLogger(__name__)


class FileFilter:
    """Decides whether a discovered path is indexed.

    A path is rejected when it does not exist or cannot be read, matches an
    exclusion, exceeds the size ceiling, has a binary extension, or (with an
    allowlist configured) has an extension outside the allowlist.

    ``eligible`` never raises. Rejections are not errors: coverage of the
    workspace is best-effort.
    """

    def __init__(self, root: Path, settings: Optional[SearchSettings] = None):
        self.root = Path(root).resolve()
        self.settings = settings or SearchSettings()
        self._binary = frozenset(self.settings.binary_extensions)
        self._allowed = frozenset(self.settings.include_extensions)

    def relative(self, path: Path) -> PurePath:
        """Path relative to the workspace root, or the path itself if outside it."""
        try:
            return path.relative_to(self.root)
        except ValueError:
            return path

    def is_excluded(self, path: Path) -> bool:
        return should_ignore_path(
            self.relative(path),
            skip_dirs=self.settings.exclude_dirs,
            exclude_patterns=self.settings.exclude_patterns,
        )

    def extension_allowed(self, path: Path) -> bool:
        ext = path.suffix.lower().lstrip(".")
        if ext in self._binary:
            return False
        if self._allowed and ext not in self._allowed:
            return False
        return True

    def eligible(self, path: Path) -> bool:
        """Check whether ``path`` should be indexed.

        Args:
            path: Absolute path of a candidate file

        Returns:
            True if the file passes every check
        """
        path = Path(path)
        try:
            stat = path.stat()
        except OSError:
            logger.debug(f"Skipping {path}: not found or not accessible")
            return False

        if not path.is_file() or not os.access(path, os.R_OK):
            logger.debug(f"Skipping {path}: not a readable file")
            return False

        if self.is_excluded(path):
            return False

        if stat.st_size > self.settings.max_file_size:
            logger.debug(f"Skipping {path}: {stat.st_size} bytes exceeds size ceiling")
            return False

        return self.extension_allowed(path)
