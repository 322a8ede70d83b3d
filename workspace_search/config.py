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

"""Search and indexing settings.

Settings are a pydantic model so that overrides loaded from YAML are
validated the same way as keyword arguments.

Example ``settings.yaml``:

```yaml
max_file_size: 524288
include_extensions: [py, lua]
exclude_patterns: ["*.min.js", "docs/generated/*"]
expansion_threshold: 3
```
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


DEFAULT_EXCLUDE_DIRS: List[str] = [
    ".git",
    "node_modules",
    ".venv",
    "venv",
    "__pycache__",
    "dist",
    "build",
    "target",
    ".idea",
    ".vscode",
]

DEFAULT_INCLUDE_EXTENSIONS: List[str] = [
    "lua",
    "py",
    "js",
    "ts",
    "jsx",
    "tsx",
    "go",
    "rs",
    "c",
    "cpp",
    "h",
    "hpp",
    "java",
    "cs",
    "rb",
    "php",
]

DEFAULT_BINARY_EXTENSIONS: List[str] = [
    # Images
    "png",
    "jpg",
    "jpeg",
    "gif",
    "bmp",
    "ico",
    "webp",
    # Documents
    "pdf",
    # Archives
    "zip",
    "tar",
    "gz",
    "7z",
    "rar",
    # Executables and libraries
    "exe",
    "dll",
    "so",
    "dylib",
    "bin",
    # Media
    "mp3",
    "mp4",
    "avi",
    "mov",
    "wmv",
    # Fonts
    "ttf",
    "otf",
    "woff",
    "woff2",
    # Databases / caches
    "db",
    "sqlite",
    "cache",
]

DEFAULT_CACHE_DIR = Path.home() / ".workspace_search" / "cache"


def _normalize_extensions(values: List[str]) -> List[str]:
    return [value.lower().lstrip(".") for value in values if value.strip(". ")]


class SearchSettings(BaseModel):
    """Tunables for crawling, indexing, persistence and querying."""

    model_config = ConfigDict(extra="forbid")

    exclude_dirs: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names pruned from the crawl wherever they appear",
    )
    exclude_patterns: List[str] = Field(
        default_factory=list,
        description="Glob patterns matched against workspace-relative paths",
    )
    include_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE_EXTENSIONS),
        description="Source extension allowlist; empty disables the allowlist",
    )
    binary_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BINARY_EXTENSIONS),
        description="Extensions that are never indexed",
    )
    max_file_size: int = Field(default=1024 * 1024, gt=0, description="Size ceiling in bytes")
    max_depth: int = Field(default=10, ge=0, description="Maximum directory depth below root")
    batch_size: int = Field(default=10, ge=1, description="Files processed per crawl batch")
    max_results: int = Field(default=20, ge=1, description="Default result limit for search")
    expansion_threshold: int = Field(
        default=5, ge=0, description="Expand queries returning fewer results than this"
    )
    expansion_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for the expansion collaborator"
    )
    max_expansion_terms: int = Field(default=5, ge=1, description="Alternative terms to use")
    cache_dir: Path = Field(
        default=DEFAULT_CACHE_DIR, description="Root directory for per-workspace snapshots"
    )
    index_on_startup: bool = Field(
        default=True, description="Build the index on initialize() when no cache is usable"
    )
    enable_watcher: bool = Field(default=False, description="Watch the workspace for changes")
    save_retries: int = Field(default=3, ge=1, description="Snapshot write attempts")

    @field_validator("include_extensions", "binary_extensions")
    @classmethod
    def _strip_dots(cls, value: List[str]) -> List[str]:
        return _normalize_extensions(value)

    @field_validator("cache_dir")
    @classmethod
    def _expand_cache_dir(cls, value: Path) -> Path:
        return Path(value).expanduser()

    @classmethod
    def from_yaml(cls, path: Path) -> "SearchSettings":
        """Load settings from a YAML file.

        Missing, unreadable or invalid files fall back to the defaults.

        Args:
            path: Path to a YAML mapping of setting overrides

        Returns:
            Validated settings
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load search settings from {path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring search settings in {path}: expected a mapping")
            return cls()

        try:
            return cls(**data)
        except ValidationError as e:
            logger.warning(f"Invalid search settings in {path}: {e}")
            return cls()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "SearchSettings":
        """Return settings from ``path`` if given, otherwise the defaults."""
        if path is None:
            return cls()
        return cls.from_yaml(path)
