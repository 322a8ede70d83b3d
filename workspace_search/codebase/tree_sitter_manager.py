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


import importlib
from typing import Dict, Tuple

from tree_sitter import Language as TSLanguage
from tree_sitter import Parser, Query

from workspace_search.languages.base import Language

# Pre-compiled grammar packages for tree-sitter 0.25+
# Install with: pip install tree-sitter-<language>
# Format: language -> ("module_name", "function_name")
LANGUAGE_MODULES: Dict[Language, Tuple[str, str]] = {
    Language.PYTHON: ("tree_sitter_python", "language"),
    Language.JAVASCRIPT: ("tree_sitter_javascript", "language"),
    Language.TYPESCRIPT: ("tree_sitter_typescript", "language_typescript"),
    Language.TSX: ("tree_sitter_typescript", "language_tsx"),
    Language.LUA: ("tree_sitter_lua", "language"),
    Language.GO: ("tree_sitter_go", "language"),
    Language.RUST: ("tree_sitter_rust", "language"),
    Language.JAVA: ("tree_sitter_java", "language"),
    Language.C: ("tree_sitter_c", "language"),
    Language.CPP: ("tree_sitter_cpp", "language"),
    Language.RUBY: ("tree_sitter_ruby", "language"),
}

_language_cache: Dict[Language, TSLanguage] = {}
_parser_cache: Dict[Language, Parser] = {}


def get_language(language: Language) -> TSLanguage:
    """
    Loads a tree-sitter Language object from its pre-compiled grammar package.

    Raises:
        ValueError: No grammar package is known for the language
        ImportError: The grammar package is not installed
    """
    if language in _language_cache:
        return _language_cache[language]

    module_info = LANGUAGE_MODULES.get(language)
    if not module_info:
        raise ValueError(f"Unsupported language for tree-sitter: {language.value}")

    module_name, func_name = module_info

    try:
        language_module = importlib.import_module(module_name)
    except ImportError:
        raise ImportError(
            f"Language package '{module_name}' not installed. "
            f"Install it with: pip install {module_name.replace('_', '-')}"
        )

    try:
        lang_func = getattr(language_module, func_name)
    except AttributeError:
        raise AttributeError(
            f"Language module '{module_name}' does not have function '{func_name}'. "
            f"Check the tree-sitter package version and update LANGUAGE_MODULES."
        )

    lang_obj = lang_func()
    # Grammar packages return a PyCapsule that must be wrapped
    lang = TSLanguage(lang_obj) if not isinstance(lang_obj, TSLanguage) else lang_obj

    _language_cache[language] = lang
    return lang


def get_parser(language: Language) -> Parser:
    """
    Returns a tree-sitter Parser initialized with the specified language.

    Parsers are cached per language and are not thread-safe; callers
    must not parse with the same language from two threads at once.
    """
    if language in _parser_cache:
        return _parser_cache[language]

    parser = Parser(get_language(language))

    _parser_cache[language] = parser
    return parser


def compile_query(language: Language, query_src: str) -> Query:
    """Compile a query for a language, raising on syntax or node-type errors."""
    return Query(get_language(language), query_src)
