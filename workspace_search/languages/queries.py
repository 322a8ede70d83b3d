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

"""Built-in symbol queries.

Provides function, class/interface and method patterns for:
- Python, JavaScript, TypeScript/TSX, Lua
- Go, Rust, Java, C, C++, Ruby

C# and PHP are detected by extension but have no queries; files in those
languages are indexed for keyword search without symbols.
"""

from typing import Dict, List

from workspace_search.languages.base import Language, QueryPattern, SymbolKind

FUNCTION = SymbolKind.FUNCTION.value
CLASS = SymbolKind.CLASS.value
METHOD = SymbolKind.METHOD.value
INTERFACE = SymbolKind.INTERFACE.value


_JS_COMMON: List[QueryPattern] = [
    QueryPattern(FUNCTION, "(function_declaration name: (identifier) @name) @def"),
    QueryPattern(FUNCTION, "(generator_function_declaration name: (identifier) @name) @def"),
    QueryPattern(
        FUNCTION,
        "(lexical_declaration (variable_declarator name: (identifier) @name value: (arrow_function))) @def",
    ),
    QueryPattern(
        FUNCTION,
        "(lexical_declaration (variable_declarator name: (identifier) @name value: (function_expression))) @def",
    ),
    QueryPattern(METHOD, "(method_definition name: (property_identifier) @name) @def"),
]


SYMBOL_PATTERNS: Dict[Language, List[QueryPattern]] = {
    Language.PYTHON: [
        QueryPattern(FUNCTION, "(function_definition name: (identifier) @name) @def"),
        QueryPattern(CLASS, "(class_definition name: (identifier) @name) @def"),
        QueryPattern(
            METHOD,
            "(class_definition body: (block (function_definition name: (identifier) @name) @def))",
        ),
        QueryPattern(
            METHOD,
            "(class_definition body: (block (decorated_definition "
            "definition: (function_definition name: (identifier) @name) @def)))",
        ),
    ],
    Language.JAVASCRIPT: [
        *_JS_COMMON,
        QueryPattern(CLASS, "(class_declaration name: (identifier) @name) @def"),
    ],
    Language.TYPESCRIPT: [
        *_JS_COMMON,
        QueryPattern(CLASS, "(class_declaration name: (type_identifier) @name) @def"),
        QueryPattern(CLASS, "(abstract_class_declaration name: (type_identifier) @name) @def"),
        QueryPattern(INTERFACE, "(interface_declaration name: (type_identifier) @name) @def"),
        QueryPattern(METHOD, "(method_signature name: (property_identifier) @name) @def"),
    ],
    Language.TSX: [
        *_JS_COMMON,
        QueryPattern(CLASS, "(class_declaration name: (type_identifier) @name) @def"),
        QueryPattern(INTERFACE, "(interface_declaration name: (type_identifier) @name) @def"),
    ],
    Language.LUA: [
        QueryPattern(
            FUNCTION,
            "(function_declaration name: [(identifier) (dot_index_expression)] @name) @def",
        ),
        QueryPattern(
            FUNCTION,
            "(assignment_statement (variable_list name: [(identifier) (dot_index_expression)] @name) "
            "(expression_list value: (function_definition))) @def",
        ),
        QueryPattern(
            METHOD,
            "(function_declaration name: (method_index_expression) @name) @def",
        ),
    ],
    Language.GO: [
        QueryPattern(FUNCTION, "(function_declaration name: (identifier) @name) @def"),
        QueryPattern(METHOD, "(method_declaration name: (field_identifier) @name) @def"),
        QueryPattern(CLASS, "(type_spec name: (type_identifier) @name type: (struct_type)) @def"),
        QueryPattern(
            INTERFACE, "(type_spec name: (type_identifier) @name type: (interface_type)) @def"
        ),
    ],
    Language.RUST: [
        QueryPattern(FUNCTION, "(function_item name: (identifier) @name) @def"),
        QueryPattern(CLASS, "(struct_item name: (type_identifier) @name) @def"),
        QueryPattern(CLASS, "(enum_item name: (type_identifier) @name) @def"),
        QueryPattern(INTERFACE, "(trait_item name: (type_identifier) @name) @def"),
        QueryPattern(
            METHOD,
            "(impl_item body: (declaration_list (function_item name: (identifier) @name) @def))",
        ),
    ],
    Language.JAVA: [
        QueryPattern(CLASS, "(class_declaration name: (identifier) @name) @def"),
        QueryPattern(CLASS, "(enum_declaration name: (identifier) @name) @def"),
        QueryPattern(INTERFACE, "(interface_declaration name: (identifier) @name) @def"),
        QueryPattern(METHOD, "(method_declaration name: (identifier) @name) @def"),
        QueryPattern(METHOD, "(constructor_declaration name: (identifier) @name) @def"),
    ],
    Language.C: [
        QueryPattern(
            FUNCTION,
            "(function_definition declarator: (function_declarator declarator: (identifier) @name)) @def",
        ),
        QueryPattern(
            CLASS,
            "(struct_specifier name: (type_identifier) @name body: (field_declaration_list)) @def",
        ),
    ],
    Language.CPP: [
        QueryPattern(
            FUNCTION,
            "(function_definition declarator: (function_declarator declarator: (identifier) @name)) @def",
        ),
        QueryPattern(CLASS, "(class_specifier name: (type_identifier) @name) @def"),
        QueryPattern(
            CLASS,
            "(struct_specifier name: (type_identifier) @name body: (field_declaration_list)) @def",
        ),
        QueryPattern(
            METHOD,
            "(function_definition declarator: (function_declarator "
            "declarator: (field_identifier) @name)) @def",
        ),
        QueryPattern(
            METHOD,
            "(function_definition declarator: (function_declarator "
            "declarator: (qualified_identifier name: (identifier) @name))) @def",
        ),
    ],
    Language.RUBY: [
        QueryPattern(CLASS, "(class name: (constant) @name) @def"),
        QueryPattern(CLASS, "(module name: (constant) @name) @def"),
        QueryPattern(METHOD, "(method name: (identifier) @name) @def"),
        QueryPattern(METHOD, "(singleton_method name: (identifier) @name) @def"),
    ],
}


LANGUAGE_EXTENSIONS: Dict[Language, List[str]] = {
    Language.PYTHON: [".py", ".pyw", ".pyi"],
    Language.JAVASCRIPT: [".js", ".jsx", ".mjs", ".cjs"],
    Language.TYPESCRIPT: [".ts", ".mts", ".cts"],
    Language.TSX: [".tsx"],
    Language.LUA: [".lua"],
    Language.GO: [".go"],
    Language.RUST: [".rs"],
    Language.JAVA: [".java"],
    Language.C: [".c"],
    Language.CPP: [".cpp", ".cc", ".cxx", ".h", ".hpp", ".hh"],
    Language.RUBY: [".rb"],
    Language.CSHARP: [".cs"],
    Language.PHP: [".php"],
}
