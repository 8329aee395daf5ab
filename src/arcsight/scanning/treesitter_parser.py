"""Tree-sitter parser wrapper.

One parser per supported language, behind a single ``parse()`` call.
Grammars ship as wheels, so every language here is always available.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "python")
    if tree.root_node.has_error:
        ...
"""

from __future__ import annotations

from typing import Any, Callable

import tree_sitter
import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_typescript

from .languages import JAVASCRIPT, PYTHON, TSX, TYPESCRIPT

# Language name -> function returning the grammar's language pointer
_GRAMMARS: dict[str, Callable[[], Any]] = {
    PYTHON: tree_sitter_python.language,
    TYPESCRIPT: tree_sitter_typescript.language_typescript,
    TSX: tree_sitter_typescript.language_tsx,
    JAVASCRIPT: tree_sitter_javascript.language,
}


class TreeSitterParser:
    """Wrapper around tree-sitter for multi-language parsing.

    Parsers are created per instance; build one per analysis call.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, tree_sitter.Parser] = {}
        for name, grammar in _GRAMMARS.items():
            self._parsers[name] = tree_sitter.Parser(tree_sitter.Language(grammar()))

    def parse(self, code: bytes, language: str) -> tree_sitter.Tree:
        """Parse code and return its syntax tree.

        Raises:
            KeyError: If the language has no grammar
        """
        return self._parsers[language].parse(code)
