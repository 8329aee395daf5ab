"""Source language detection by file extension."""

from __future__ import annotations

from typing import Optional

TYPESCRIPT = "typescript"
TSX = "tsx"
JAVASCRIPT = "javascript"
PYTHON = "python"

_EXTENSIONS: dict[str, str] = {
    ".ts": TYPESCRIPT,
    ".tsx": TSX,
    ".mts": TYPESCRIPT,
    ".cts": TYPESCRIPT,
    ".js": JAVASCRIPT,
    ".jsx": JAVASCRIPT,
    ".mjs": JAVASCRIPT,
    ".cjs": JAVASCRIPT,
    ".py": PYTHON,
}

# Extensions tried, in this order, when a specifier omits one.
SCRIPT_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts", ".js", ".jsx", ".mjs", ".cjs")

# Declaration files carry types only and never take part in the graph.
_DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")


def language_for(path: str) -> Optional[str]:
    """Language of a source file, or None when the file is not analyzed."""
    name = path.rsplit("/", 1)[-1]
    if name.endswith(_DECLARATION_SUFFIXES):
        return None
    dot = name.rfind(".")
    if dot <= 0:
        return None
    return _EXTENSIONS.get(name[dot:])


def is_script(language: Optional[str]) -> bool:
    return language in (TYPESCRIPT, TSX, JAVASCRIPT)
