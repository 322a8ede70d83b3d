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

"""Tests for the workspace crawler."""

import asyncio
from pathlib import Path

from workspace_search.codebase.crawler import Crawler, crawl
from workspace_search.codebase.file_filter import FileFilter
from workspace_search.config import SearchSettings


def _write(path: Path, text: str = "def foo(): pass\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestCrawler:
    """Test Crawler walks and batching."""

    def test_yields_eligible_files(self, workspace: Path):
        paths = list(crawl(workspace, FileFilter(workspace)))
        assert sorted(p.name for p in paths) == ["a.py", "b.py"]
        assert all(p.is_absolute() for p in paths)

    def test_prunes_excluded_directories(self, workspace: Path):
        """Files below excluded or hidden directories are never reached."""
        _write(workspace / "node_modules" / "pkg" / "index.js")
        _write(workspace / ".git" / "hooks" / "pre-commit.py")
        _write(workspace / "src" / "main.py")

        crawler = Crawler(workspace, FileFilter(workspace))
        names = sorted(p.name for p in crawler.iter_paths())

        assert names == ["a.py", "b.py", "main.py"]
        # Pruned subtrees are not even discovered
        assert crawler.stats.discovered == 3

    def test_counts_skipped_files(self, workspace: Path):
        (workspace / "logo.png").write_bytes(b"\x89PNG")
        crawler = Crawler(workspace, FileFilter(workspace))
        list(crawler.iter_paths())

        assert crawler.stats.discovered == 3
        assert crawler.stats.eligible == 2
        assert crawler.stats.skipped == 1

    def test_max_depth(self, workspace: Path):
        _write(workspace / "one" / "shallow.py")
        _write(workspace / "one" / "two" / "deep.py")

        crawler = Crawler(workspace, FileFilter(workspace), max_depth=1)
        names = sorted(p.name for p in crawler.iter_paths())

        assert "shallow.py" in names
        assert "deep.py" not in names

    def test_batches_are_bounded(self, workspace: Path):
        for i in range(5):
            _write(workspace / f"mod{i}.py")

        crawler = Crawler(workspace, FileFilter(workspace), batch_size=3)
        batches = list(crawler.iter_batches())

        assert [len(b) for b in batches] == [3, 3, 1]

    def test_async_batches(self, workspace: Path):
        """The async generator yields the same files as the sync walk."""
        crawler = Crawler(workspace, FileFilter(workspace), batch_size=1)

        async def collect():
            return [batch async for batch in crawler.batches()]

        batches = asyncio.run(collect())

        assert len(batches) == 2
        assert sorted(b[0].name for b in batches) == ["a.py", "b.py"]

    def test_each_walk_starts_fresh(self, workspace: Path):
        crawler = Crawler(workspace, FileFilter(workspace))
        first = list(crawler.iter_paths())
        second = list(crawler.iter_paths())

        assert first == second
        assert crawler.stats.eligible == 2

    def test_crawl_uses_settings_depth(self, workspace: Path):
        _write(workspace / "one" / "deep.py")
        settings = SearchSettings(max_depth=0)
        names = [p.name for p in crawl(workspace, FileFilter(workspace, settings))]

        assert "deep.py" not in names
