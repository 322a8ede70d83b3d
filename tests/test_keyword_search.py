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

"""Tests for keyword scoring and ranking."""

from workspace_search.codebase.models import FileRecord
from workspace_search.codebase.search import best_line, keyword_search, tokenize


def make_record(path: str, content: str) -> FileRecord:
    return FileRecord(
        path=path, content=content, size=len(content), modified_at=0.0, indexed_at=0.0
    )


class TestTokenize:
    """Test query tokenization."""

    def test_case_folded_and_distinct(self):
        assert tokenize("Foo  bar FOO") == ["foo", "bar"]

    def test_blank_query(self):
        assert tokenize("   ") == []


class TestBestLine:
    """Test representative line selection."""

    def test_line_with_most_keywords(self):
        content = "foo\nfoo bar\nbar"
        assert best_line(content, ["foo", "bar"]) == (2, "foo bar")

    def test_ties_go_to_first_line(self):
        content = "x\nfoo here\nfoo again"
        assert best_line(content, ["foo"]) == (2, "foo here")

    def test_case_insensitive(self):
        assert best_line("a\nDEF Foo", ["foo"]) == (2, "DEF Foo")


class TestKeywordSearch:
    """Test keyword_search semantics."""

    def setup_method(self):
        self.records = [
            make_record("/ws/a.py", "def foo(): pass\n"),
            make_record("/ws/b.py", "def bar(): pass\n"),
        ]

    def test_single_keyword(self):
        results = keyword_search(self.records, "foo")

        assert len(results) == 1
        assert (results[0].path, results[0].line, results[0].score) == ("/ws/a.py", 1, 1)
        assert results[0].preview == "def foo(): pass"

    def test_and_semantics(self):
        """No file contains both keywords, so nothing matches."""
        assert keyword_search(self.records, "foo bar") == []

    def test_every_result_contains_every_keyword(self):
        records = self.records + [make_record("/ws/c.py", "foo = bar()\n")]
        results = keyword_search(records, "FOO Bar")

        assert [r.path for r in results] == ["/ws/c.py"]
        for result in results:
            content = next(r.content for r in records if r.path == result.path).casefold()
            assert "foo" in content and "bar" in content

    def test_score_counts_distinct_keywords(self):
        records = [make_record("/ws/c.py", "foo bar\n")]
        assert keyword_search(records, "foo bar foo")[0].score == 2

    def test_keywords_on_separate_lines(self):
        records = [make_record("/ws/c.py", "import os\n\nfoo = 1\nbar = 2\n")]
        result = keyword_search(records, "foo bar")[0]

        assert result.score == 2
        assert result.line == 3
        assert result.preview == "foo = 1"

    def test_substring_match(self):
        records = [make_record("/ws/c.py", "def football(): pass\n")]
        assert len(keyword_search(records, "foot")) == 1

    def test_ranked_by_score_then_path(self):
        records = [
            make_record("/ws/z.py", "foo\n"),
            make_record("/ws/m.py", "foo\n"),
            make_record("/ws/a.py", "foo\n"),
        ]
        assert [r.path for r in keyword_search(records, "foo")] == [
            "/ws/a.py",
            "/ws/m.py",
            "/ws/z.py",
        ]

    def test_max_results(self):
        records = [make_record(f"/ws/{i:02d}.py", "foo\n") for i in range(30)]

        assert len(keyword_search(records, "foo")) == 20
        assert len(keyword_search(records, "foo", max_results=5)) == 5

    def test_blank_query(self):
        assert keyword_search(self.records, "") == []
        assert keyword_search(self.records, "   ") == []

    def test_symbols_are_attached(self):
        from workspace_search.codebase.models import Symbol

        record = FileRecord(
            path="/ws/a.py",
            content="def foo(): pass\n",
            symbols=[Symbol(name="foo", kind="function", line=1)],
            size=16,
            modified_at=0.0,
            indexed_at=0.0,
        )
        result = keyword_search([record], "foo")[0]
        assert [s.name for s in result.symbols] == ["foo"]
