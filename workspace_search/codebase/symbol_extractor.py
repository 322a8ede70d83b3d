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

"""Registry-driven tree-sitter symbol extraction.

All language-specific knowledge lives in the language registry; this
module only compiles the registered patterns and turns matches into
:class:`Symbol` records. Extraction is an enhancement to keyword search,
so every failure degrades to an empty symbol list.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

from tree_sitter import QueryCursor

from workspace_search.codebase.models import Symbol
from workspace_search.codebase.tree_sitter_manager import compile_query, get_parser
from workspace_search.languages.base import Language, SymbolQuery
from workspace_search.languages.registry import LanguageRegistry, default_registry

if TYPE_CHECKING:
    from tree_sitter import Node, Parser, Query

logger = logging.getLogger(__name__)

# Compiled query plus the patterns it was built from, in pattern index order
_CompiledQuery = Tuple["Query", SymbolQuery]


class SymbolExtractor:
    """Extract named definitions using the language registry.

    Parsers and compiled queries are cached per instance. An instance must
    be used from one thread at a time.
    """

    def __init__(self, registry: Optional[LanguageRegistry] = None):
        """Initialize extractor with optional custom registry.

        Args:
            registry: Language registry to use. If None, uses the default registry.
        """
        self.registry = registry or default_registry()
        self._parsers: Dict[Language, Optional["Parser"]] = {}
        self._queries: Dict[Language, Optional[_CompiledQuery]] = {}

    def detect_language(self, file_path: Path) -> Optional[Language]:
        return self.registry.detect_language(Path(file_path))

    def _get_parser(self, language: Language) -> Optional["Parser"]:
        """Get a parser, or None if the grammar is unavailable."""
        if language in self._parsers:
            return self._parsers[language]

        try:
            parser: Optional["Parser"] = get_parser(language)
        except Exception as e:
            logger.debug(f"Could not get parser for {language.value}: {e}")
            parser = None
        self._parsers[language] = parser
        return parser

    def _get_query(self, symbol_query: SymbolQuery) -> Optional[_CompiledQuery]:
        """Compile all patterns of a language into one query.

        If the combined query does not compile (for example a grammar
        version renamed a node type), the patterns that do compile are kept.
        """
        language = symbol_query.language
        if language in self._queries:
            return self._queries[language]

        compiled: Optional[_CompiledQuery] = None
        try:
            query = compile_query(language, symbol_query.source)
            compiled = (query, symbol_query)
        except Exception as e:
            logger.debug(f"Symbol query for {language.value} failed to compile: {e}")
            valid = []
            for pattern in symbol_query.patterns:
                try:
                    compile_query(language, pattern.query)
                    valid.append(pattern)
                except Exception as pattern_error:
                    logger.debug(f"Dropping pattern {pattern.query!r}: {pattern_error}")
            if valid:
                try:
                    subset = SymbolQuery(language=language, patterns=valid)
                    compiled = (compile_query(language, subset.source), subset)
                except Exception as retry_error:
                    logger.debug(f"Symbol query for {language.value} unusable: {retry_error}")

        self._queries[language] = compiled
        return compiled

    def extract(
        self, content: Union[str, bytes], language: Optional[Union[Language, str]]
    ) -> List[Symbol]:
        """Extract symbols from file content.

        Args:
            content: File content
            language: Language tag; unknown or unregistered languages yield []

        Returns:
            Symbols in match order (not necessarily sorted by line)
        """
        if isinstance(language, str) and not isinstance(language, Language):
            language = Language.parse(language)
        if language is None:
            return []

        if not self.registry.has(language):
            return []
        symbol_query = self.registry.get(language)

        parser = self._get_parser(language)
        if parser is None:
            return []
        compiled = self._get_query(symbol_query)
        if compiled is None:
            return []
        query, compiled_query = compiled

        source = content.encode("utf-8") if isinstance(content, str) else content
        try:
            tree = parser.parse(source)
            matches = QueryCursor(query).matches(tree.root_node)
        except Exception as e:
            logger.debug(f"Failed to parse {language.value} content: {e}")
            return []

        symbols: List[Symbol] = []
        # (def start, def end, name start) -> (position in symbols, pattern index)
        seen: Dict[Tuple[int, int, int], Tuple[int, int]] = {}

        for pattern_index, captures in matches:
            name_nodes = captures.get("name") or []
            if not name_nodes:
                continue
            name_node: "Node" = name_nodes[0]
            def_node: "Node" = (captures.get("def") or [name_node])[0]

            name = name_node.text.decode("utf-8", errors="ignore") if name_node.text else ""
            if not name:
                continue

            kind = compiled_query.kind_for(pattern_index)
            key = (def_node.start_byte, def_node.end_byte, name_node.start_byte)
            if key in seen:
                position, previous_index = seen[key]
                if pattern_index > previous_index:
                    symbols[position] = symbols[position].model_copy(update={"kind": kind})
                    seen[key] = (position, pattern_index)
                continue

            seen[key] = (len(symbols), pattern_index)
            symbols.append(Symbol(name=name, kind=kind, line=def_node.start_point[0] + 1))

        return symbols

    def extract_file(self, file_path: Path) -> List[Symbol]:
        """Detect the language of a file, read it and extract its symbols."""
        language = self.detect_language(file_path)
        if language is None:
            return []
        try:
            content = Path(file_path).read_bytes()
        except OSError as e:
            logger.debug(f"Failed to read {file_path}: {e}")
            return []
        return self.extract(content, language)
