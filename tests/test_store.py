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

"""Tests for the in-memory index store."""

from workspace_search.codebase.models import FileRecord, Symbol
from workspace_search.codebase.store import IndexStore


def make_record(path: str, content: str = "", symbols=None) -> FileRecord:
    return FileRecord(
        path=path,
        content=content,
        symbols=symbols or [],
        size=len(content),
        modified_at=1.0,
        indexed_at=2.0,
    )


class TestIndexStore:
    """Test IndexStore operations."""

    def test_put_and_get(self):
        store = IndexStore()
        record = make_record("/ws/a.py", "def foo(): pass")
        store.put(record.path, record)

        assert store.get("/ws/a.py") == record
        assert store.get("/ws/missing.py") is None
        assert "/ws/a.py" in store
        assert len(store) == 1

    def test_put_replaces_wholesale(self):
        store = IndexStore()
        store.put("/ws/a.py", make_record("/ws/a.py", "old"))
        store.put("/ws/a.py", make_record("/ws/a.py", "new"))

        assert len(store) == 1
        assert store.get("/ws/a.py").content == "new"

    def test_remove(self):
        store = IndexStore()
        store.put_many([make_record("/ws/a.py"), make_record("/ws/b.py")])

        assert store.remove("/ws/a.py") is True
        assert store.remove("/ws/a.py") is False
        assert [r.path for r in store.all()] == ["/ws/b.py"]

    def test_all_returns_a_copy(self):
        """Mutating the store does not affect a list obtained earlier."""
        store = IndexStore()
        store.put_many([make_record("/ws/a.py"), make_record("/ws/b.py")])
        records = store.all()
        store.clear()

        assert len(records) == 2
        assert len(store) == 0

    def test_replace_all(self):
        store = IndexStore()
        store.put("/ws/old.py", make_record("/ws/old.py"))
        store.replace_all({"/ws/new.py": make_record("/ws/new.py")})

        assert "/ws/old.py" not in store
        assert "/ws/new.py" in store

    def test_symbol_count(self):
        store = IndexStore()
        store.put_many(
            [
                make_record("/ws/a.py", symbols=[Symbol(name="foo", kind="function", line=1)]),
                make_record(
                    "/ws/b.py",
                    symbols=[
                        Symbol(name="A", kind="class", line=1),
                        Symbol(name="run", kind="method", line=2),
                    ],
                ),
            ]
        )
        assert store.symbol_count() == 3

    def test_as_dict(self):
        store = IndexStore()
        record = make_record("/ws/a.py")
        store.put(record.path, record)
        assert store.as_dict() == {"/ws/a.py": record}
