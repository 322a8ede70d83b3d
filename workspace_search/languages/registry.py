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

"""Language registry.

Maps language tags to symbol queries and file extensions to language
tags, providing a central point for language detection and routing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from workspace_search.languages.base import Language, QueryPattern, SymbolQuery

logger = logging.getLogger(__name__)


class LanguageRegistry:
    """Registry of symbol queries keyed by :class:`Language`.

    Provides:
    - Query registration per language
    - Language detection from file extensions
    - An explicit check for languages without a registered query
    """

    def __init__(self) -> None:
        self._queries: Dict[Language, SymbolQuery] = {}
        self._extension_map: Dict[str, Language] = {}  # .py -> Language.PYTHON

    def register(
        self,
        language: Language,
        patterns: Iterable[QueryPattern],
        extensions: Optional[Iterable[str]] = None,
    ) -> None:
        """Register symbol patterns for a language.

        Args:
            language: Language tag
            patterns: Symbol query patterns, generic before specific
            extensions: File extensions mapped to this language
        """
        self._queries[language] = SymbolQuery(language=language, patterns=list(patterns))
        if extensions:
            self.map_extensions(language, extensions)
        logger.debug(f"Registered symbol query for {language.value}")

    def map_extensions(self, language: Language, extensions: Iterable[str]) -> None:
        """Associate file extensions with a language without registering a query."""
        for ext in extensions:
            ext = ext.lower()
            if not ext.startswith("."):
                ext = "." + ext
            self._extension_map[ext] = language

    def unregister(self, language: Language) -> None:
        self._queries.pop(language, None)

    def get(self, language: Language) -> SymbolQuery:
        """Get the symbol query for a language.

        Raises:
            KeyError: If no query is registered for the language
        """
        if language not in self._queries:
            available = ", ".join(sorted(lang.value for lang in self._queries))
            raise KeyError(f"No symbol query for '{language.value}'. Available: {available}")
        return self._queries[language]

    def has(self, language: Language) -> bool:
        return language in self._queries

    def detect_language(self, path: Path) -> Optional[Language]:
        """Detect the language of a file from its extension.

        Args:
            path: File path to check

        Returns:
            Language tag or None if the extension is unknown
        """
        return self._extension_map.get(path.suffix.lower())

    def list_languages(self) -> List[Language]:
        """Languages with a registered query, sorted by tag."""
        return sorted(self._queries, key=lambda lang: lang.value)


def build_default_registry() -> LanguageRegistry:
    """Create a registry populated with the built-in queries.

    Returns:
        A new registry; every known extension is mapped, and query-less
        languages stay detectable but unsupported for extraction
    """
    from workspace_search.languages.queries import LANGUAGE_EXTENSIONS, SYMBOL_PATTERNS

    registry = LanguageRegistry()
    for language, extensions in LANGUAGE_EXTENSIONS.items():
        patterns = SYMBOL_PATTERNS.get(language)
        if patterns:
            registry.register(language, patterns, extensions)
        else:
            registry.map_extensions(language, extensions)
    return registry


# Global registry instance
_default_registry: Optional[LanguageRegistry] = None


def default_registry() -> LanguageRegistry:
    """Get the shared registry populated with the built-in queries."""
    global _default_registry
    if _default_registry is None:
        _default_registry = build_default_registry()
    return _default_registry
