"""Raw snapshot loading for the CLI: working trees and git revisions.

The engine never touches the filesystem; these helpers produce the raw file
tuples it consumes.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .models import RawFile

logger = get_logger(__name__)

# Never part of the analyzed tree
SKIP_DIRS = frozenset({".git", ".hg", ".svn", "node_modules", "__pycache__", ".venv", "venv"})

GIT_TIMEOUT_SECONDS = 60

# Object name of the empty tree; the diff base of a root commit
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


def load_directory(root: Path, skip_dirs: frozenset[str] = SKIP_DIRS) -> tuple[RawFile, ...]:
    """Read every regular file below ``root`` as raw bytes.

    Symlinks are not followed.

    Raises:
        InvalidPathError: If ``root`` is not a directory
    """
    if not root.is_dir():
        raise InvalidPathError(root, "not a directory")

    files = []
    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root)
        if any(part in skip_dirs for part in relative.parts[:-1]):
            continue
        if path.is_symlink() or not path.is_file():
            continue
        files.append(RawFile(path=relative.as_posix(), content=path.read_bytes()))
    logger.debug("Loaded %d files from %s", len(files), root)
    return tuple(files)


def load_git_revision(repo: Path, revision: str) -> tuple[RawFile, ...]:
    """Read every blob of ``revision`` in ``repo``.

    Raises:
        InvalidPathError: If git fails or the revision does not exist
    """
    listing = _git(repo, "ls-tree", "-r", "-z", "--full-tree", revision)
    files = []
    for entry in listing.split(b"\x00"):
        if not entry:
            continue
        meta, _, path = entry.partition(b"\t")
        mode, kind, sha = meta.split(b" ")
        # Submodules (commit) and symlinks (120000) carry no source
        if kind != b"blob" or mode == b"120000":
            continue
        content = _git(repo, "cat-file", "blob", sha.decode())
        files.append(RawFile(path=path.decode("utf-8", "surrogateescape"), content=content))
    logger.debug("Loaded %d files from %s@%s", len(files), repo, revision)
    return tuple(files)


def first_parent(repo: Path, revision: str) -> Optional[str]:
    """SHA of the first parent of ``revision``, None for a root commit."""
    out = _git(repo, "rev-list", "--parents", "-n", "1", revision).decode().split()
    return out[1] if len(out) > 1 else None


def git_diff(repo: Path, base: str, head: str) -> str:
    """``git diff -U0 -M`` between two revisions."""
    return _git(repo, "diff", "-U0", "-M", "--no-color", "--no-ext-diff", base, head).decode(
        "utf-8", "replace"
    )


def _git(repo: Path, *args: str) -> bytes:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(repo),
            capture_output=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except FileNotFoundError:
        raise InvalidPathError(repo, "git executable not found")
    except subprocess.TimeoutExpired:
        raise InvalidPathError(repo, f"git {args[0]} timed out")

    if result.returncode != 0:
        raise InvalidPathError(
            repo, f"git {args[0]} failed: {result.stderr.decode('utf-8', 'replace').strip()}"
        )
    return result.stdout
