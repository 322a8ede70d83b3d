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

"""Shared ignore patterns and path exclusion logic.

Used by both the crawler (to prune whole directories while walking) and the
file filter (to reject individual paths), so the two always agree.

Exclusion pattern forms:
- ``name`` or ``name/``: any path component equal to ``name``
- glob (``*``, ``?``, ``[``): matched against the workspace-relative POSIX
  path and against the file name
"""

import fnmatch
from pathlib import PurePath
from typing import Iterable

_GLOB_CHARS = frozenset("*?[")


def is_hidden_path(path: PurePath) -> bool:
    """Check if any component of the path is hidden.

    Hidden components follow Unix convention: they start with '.'
    Excludes '.' and '..' which are special directory entries.

    Args:
        path: Path to check, relative to the workspace root

    Returns:
        True if path contains any hidden components
    """
    for part in path.parts:
        if part.startswith(".") and part not in (".", ".."):
            return True
    return False


def is_glob(pattern: str) -> bool:
    return any(ch in _GLOB_CHARS for ch in pattern)


def matches_pattern(rel_path: PurePath, pattern: str) -> bool:
    """Check a single exclusion pattern against a workspace-relative path.

    Example:
        >>> from pathlib import PurePosixPath
        >>> matches_pattern(PurePosixPath("node_modules/lodash/index.js"), "node_modules")
        True
        >>> matches_pattern(PurePosixPath("web/app.min.js"), "*.min.js")
        True
        >>> matches_pattern(PurePosixPath("docs/generated/api.py"), "docs/generated/*")
        True
        >>> matches_pattern(PurePosixPath("src/main.py"), "build/")
        False
    """
    if is_glob(pattern):
        posix = rel_path.as_posix()
        return fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(rel_path.name, pattern)

    name = pattern.strip("/")
    if "/" in name:
        posix = rel_path.as_posix()
        return posix == name or posix.startswith(name + "/") or f"/{name}/" in f"/{posix}/"
    return name in rel_path.parts


def should_ignore_dir(name: str, skip_dirs: Iterable[str], include_hidden: bool = False) -> bool:
    """Check if a directory entry should be pruned from a walk.

    Args:
        name: Directory name (single component)
        skip_dirs: Directory names to skip
        include_hidden: Whether hidden directories are walked

    Returns:
        True if the whole subtree should be skipped
    """
    if not include_hidden and name.startswith(".") and name not in (".", ".."):
        return True
    return name in skip_dirs


def should_ignore_path(
    rel_path: PurePath,
    skip_dirs: Iterable[str] = (),
    exclude_patterns: Iterable[str] = (),
    include_hidden: bool = False,
) -> bool:
    """Check if a workspace-relative path is excluded.

    Args:
        rel_path: Path relative to the workspace root
        skip_dirs: Directory names excluded wherever they appear
        exclude_patterns: Additional name or glob patterns
        include_hidden: Whether hidden components are allowed

    Returns:
        True if the path should be ignored
    """
    if not include_hidden and is_hidden_path(rel_path):
        return True

    skip = set(skip_dirs)
    if any(part in skip for part in rel_path.parts[:-1]):
        return True

    return any(matches_pattern(rel_path, pattern) for pattern in exclude_patterns)
