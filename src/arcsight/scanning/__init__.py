"""Source scanning: language detection and import extraction."""

from .imports import ImportDecl, ScanResult, scan_file
from .languages import JAVASCRIPT, PYTHON, TSX, TYPESCRIPT, language_for
from .treesitter_parser import TreeSitterParser

__all__ = [
    "ImportDecl",
    "ScanResult",
    "TreeSitterParser",
    "scan_file",
    "language_for",
    "JAVASCRIPT",
    "PYTHON",
    "TSX",
    "TYPESCRIPT",
]
