"""Import extraction from tree-sitter parse trees.

Extracts static import declarations with their 1-based line numbers.
Specifiers are read from string-literal nodes in import position only, so
text inside strings, template literals, comments and docstrings never
becomes an import.

Supports: TypeScript, TSX, JavaScript, Python

A file fails segmentation when it is not text or when its parse tree holds
an error or missing node. Its imports are then discarded as a whole.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..snapshot.models import SourceFile
from .languages import PYTHON, is_script, language_for
from .treesitter_parser import TreeSitterParser


@dataclass(frozen=True)
class ImportDecl:
    """An import declaration.

    Attributes:
        specifier: Module being imported (e.g., "./b", "@app/x", "..models")
        line: 1-based line of the ``import``/``from``/``export``/``require``
        is_type_only: True for type-only imports (never graph edges)
        names: Imported names, for Python ``from`` imports
    """

    specifier: str
    line: int
    is_type_only: bool = False
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScanResult:
    """Imports of one source file, sorted by (line, specifier)."""

    path: str
    language: str
    imports: tuple[ImportDecl, ...]
    segmented: bool


def scan_file(source: SourceFile, parser: Optional[TreeSitterParser] = None) -> Optional[ScanResult]:
    """Scan one canonical file. Returns None for non-source files.

    Pass a shared ``parser`` when scanning many files in one call.
    """
    language = language_for(source.path)
    if language is None:
        return None

    text = source.text
    if text is None:
        return ScanResult(path=source.path, language=language, imports=(), segmented=False)

    tree = (parser or TreeSitterParser()).parse(text.encode("utf-8"), language)
    root = tree.root_node
    if root.has_error:
        return ScanResult(path=source.path, language=language, imports=(), segmented=False)

    if is_script(language):
        imports = _script_imports(root)
    elif language == PYTHON:
        imports = _python_imports(root)
    else:
        imports = []

    imports.sort(key=lambda d: (d.line, d.specifier, d.is_type_only, d.names))
    return ScanResult(path=source.path, language=language, imports=tuple(imports), segmented=True)


# ── TypeScript / JavaScript ──────────────────────────────────────────


def _script_imports(root: Any) -> list[ImportDecl]:
    imports: list[ImportDecl] = []
    stack = [root]
    while stack:
        node = stack.pop()
        kind = node.type

        if kind == "import_statement":
            decl = _import_statement(node)
            if decl is not None:
                imports.append(decl)
            continue

        if kind == "export_statement":
            source = node.child_by_field_name("source")
            if source is not None:
                spec = _string_value(source)
                if spec:
                    type_only = _has_type_keyword(node) or _type_only_clause(
                        _child_of_type(node, "export_clause"), "export_specifier"
                    )
                    imports.append(ImportDecl(spec, _line(node), type_only))
                continue

        elif kind == "call_expression":
            spec = _require_specifier(node)
            if spec:
                imports.append(ImportDecl(spec, _line(node)))

        stack.extend(node.named_children)
    return imports


def _import_statement(node: Any) -> Optional[ImportDecl]:
    type_only = _has_type_keyword(node)
    source = node.child_by_field_name("source")
    if source is None:
        # import x = require('...')
        clause = _child_of_type(node, "import_require_clause")
        if clause is None:
            return None
        source = clause.child_by_field_name("source") or _child_of_type(clause, "string")
    else:
        type_only = type_only or _type_only_clause(
            _child_of_type(node, "import_clause"), "import_specifier"
        )
    if source is None or source.type != "string":
        return None
    spec = _string_value(source)
    return ImportDecl(spec, _line(node), type_only) if spec else None


def _type_only_clause(clause: Any, specifier_type: str) -> bool:
    """``{ type A, type B }`` imports nothing at runtime."""
    if clause is None:
        return False
    named = [c for c in clause.named_children if c.type != "comment"]
    if clause.type == "import_clause":
        if len(named) != 1 or named[0].type != "named_imports":
            return False
        named = [c for c in named[0].named_children if c.type != "comment"]
    specifiers = [c for c in named if c.type == specifier_type]
    return bool(specifiers) and len(specifiers) == len(named) and all(
        _has_type_keyword(s) for s in specifiers
    )


def _require_specifier(node: Any) -> Optional[str]:
    function = node.child_by_field_name("function")
    if function is None or function.type != "identifier" or _text(function) != "require":
        return None
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return None
    args = [c for c in arguments.named_children if c.type != "comment"]
    if len(args) != 1 or args[0].type != "string":
        return None
    return _string_value(args[0])


def _has_type_keyword(node: Any) -> bool:
    return any(not c.is_named and c.type == "type" for c in node.children)


def _string_value(node: Any) -> str:
    text = _text(node)
    return text[1:-1] if len(text) >= 2 else ""


# ── Python ───────────────────────────────────────────────────────────

_TYPE_CHECKING_NAMES = frozenset({"TYPE_CHECKING", "typing.TYPE_CHECKING"})


def _python_imports(root: Any) -> list[ImportDecl]:
    imports: list[ImportDecl] = []
    stack: list[tuple[Any, bool]] = [(root, False)]
    while stack:
        node, type_only = stack.pop()
        kind = node.type

        # Imports inside function bodies are deferred and never edges.
        if kind == "function_definition":
            continue

        if kind == "import_statement":
            line = _line(node)
            for name in node.children_by_field_name("name"):
                imports.append(ImportDecl(_dotted(_aliased(name)), line, type_only))
            continue

        if kind == "import_from_statement":
            module = _python_module(node.child_by_field_name("module_name"))
            names = tuple(sorted({_dotted(_aliased(n)) for n in node.children_by_field_name("name")}))
            imports.append(ImportDecl(module, _line(node), type_only, names))
            continue

        if kind == "if_statement":
            condition = node.child_by_field_name("condition")
            if condition is not None and _text(condition) in _TYPE_CHECKING_NAMES:
                consequence = node.child_by_field_name("consequence")
                if consequence is not None:
                    stack.append((consequence, True))
                stack.extend(
                    (c, type_only) for c in node.children if c.type in ("elif_clause", "else_clause")
                )
                continue

        stack.extend((child, type_only) for child in node.named_children)
    return imports


def _python_module(node: Any) -> str:
    if node is None:
        return ""
    if node.type != "relative_import":
        return _dotted(node)
    prefix = _child_of_type(node, "import_prefix")
    dots = _text(prefix).count(".") if prefix is not None else 0
    module = _child_of_type(node, "dotted_name")
    return "." * dots + (_dotted(module) if module is not None else "")


def _aliased(node: Any) -> Any:
    """The module or name node of ``x as y``."""
    if node.type == "aliased_import":
        return node.child_by_field_name("name")
    return node


def _dotted(node: Any) -> str:
    if node is None:
        return ""
    if node.type == "dotted_name":
        return ".".join(_text(c) for c in node.named_children if c.type == "identifier")
    return _text(node)


# ── Shared helpers ───────────────────────────────────────────────────


def _child_of_type(node: Any, child_type: str) -> Any:
    for child in node.children:
        if child.type == child_type:
            return child
    return None


def _text(node: Any) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _line(node: Any) -> int:
    return node.start_point[0] + 1
