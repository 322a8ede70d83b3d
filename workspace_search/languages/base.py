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

"""Base types for language symbol queries.

Defines the language tags and the tree-sitter query structures the
symbol extractor runs for each registered language.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Language(str, Enum):
    """Language tags understood by the registry.

    The value doubles as the tree-sitter grammar name.
    """

    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    TSX = "tsx"
    LUA = "lua"
    GO = "go"
    RUST = "rust"
    JAVA = "java"
    C = "c"
    CPP = "cpp"
    RUBY = "ruby"
    CSHARP = "csharp"
    PHP = "php"

    @classmethod
    def parse(cls, value: str) -> Optional["Language"]:
        """Return the tag for ``value`` or None if it is not a known language."""
        try:
            return cls(value.lower())
        except ValueError:
            return None


class SymbolKind(str, Enum):
    """Kinds of named entities the extractor reports.

    Query patterns may use other kind strings; those pass through as
    opaque tags.
    """

    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    INTERFACE = "interface"


@dataclass
class QueryPattern:
    """Single tree-sitter pattern for symbol extraction.

    The pattern must be one top-level S-expression that captures the
    identifier as ``@name`` and the defining node as ``@def``.

    Attributes:
        kind: Symbol kind reported for matches of this pattern
        query: The tree-sitter pattern
    """

    kind: str
    query: str


@dataclass
class SymbolQuery:
    """All symbol patterns for one language.

    Patterns are compiled together into one query. When a definition node
    matches more than one pattern, the pattern listed later decides its
    kind, so specific patterns (methods) go after generic ones (functions).
    """

    language: Language
    patterns: List[QueryPattern] = field(default_factory=list)

    @property
    def source(self) -> str:
        """Combined query source, one pattern per line in pattern order."""
        return "\n".join(pattern.query.strip() for pattern in self.patterns)

    def kind_for(self, pattern_index: int) -> str:
        return self.patterns[pattern_index].kind
