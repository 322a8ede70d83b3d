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

"""Shared fixtures for workspace search tests."""

from pathlib import Path

import pytest

from workspace_search.config import SearchSettings


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with two small Python files."""
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "a.py").write_text("def foo(): pass\n", encoding="utf-8")
    (root / "b.py").write_text("def bar(): pass\n", encoding="utf-8")
    return root


@pytest.fixture
def settings(tmp_path: Path) -> SearchSettings:
    """Default settings with the snapshot cache kept inside the test directory."""
    return SearchSettings(cache_dir=tmp_path / "cache")
