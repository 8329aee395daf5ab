"""Canonicalizer: raw repository input to a canonical RepoSnapshot.

Steps, always in this order:
    1. POSIX path normalization (separators, duplicate slashes, ``.``/``..``)
    2. Path case is preserved; ``A.ts`` and ``a.ts`` are different files
    3. Newline normalization of text content (CRLF and CR to LF)
    4. Unicode NFC normalization of text content
    5. Sort by canonical path

Text means strict UTF-8 without NUL bytes; everything else is binary and
passes through byte for byte.
"""

from __future__ import annotations

import hashlib
import unicodedata
from typing import Iterable

from ..exceptions import CanonicalizationError
from .models import RawFile, RepoSnapshot, SourceFile

_BOM = "\ufeff"


def canonical_path(path: str) -> str:
    """Normalize a repository-relative path to its canonical POSIX form.

    Raises:
        CanonicalizationError: If the path is empty or escapes the root
    """
    unified = path.replace("\\", "/")
    parts: list[str] = []
    for part in unified.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not parts:
                raise CanonicalizationError(
                    "path escapes the repository root", context={"path": path}
                )
            parts.pop()
            continue
        parts.append(unicodedata.normalize("NFC", part))
    if not parts:
        raise CanonicalizationError("path is empty after normalization", context={"path": path})
    return "/".join(parts)


def normalize_content(content: bytes) -> tuple[bytes, bool]:
    """Return ``(canonical_bytes, is_text)`` for one file body."""
    if b"\x00" in content:
        return content, False
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return content, False
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = unicodedata.normalize("NFC", text)
    return text.encode("utf-8"), True


def canonicalize(raw_files: Iterable[RawFile]) -> RepoSnapshot:
    """Build the canonical snapshot.

    Raises:
        CanonicalizationError: If two distinct raw paths collapse to the same
            canonical path, or a path is unusable
    """
    by_path: dict[str, tuple[str, SourceFile]] = {}
    for raw in raw_files:
        path = canonical_path(raw.path)
        if path in by_path:
            previous_raw, _ = by_path[path]
            raise CanonicalizationError(
                "distinct raw paths collapse to one canonical path",
                context={"canonical": path, "first": previous_raw, "second": raw.path},
            )
        content, is_text = normalize_content(raw.content)
        by_path[path] = (raw.path, SourceFile(path=path, content=content, is_text=is_text))

    return RepoSnapshot(files=tuple(by_path[p][1] for p in sorted(by_path)))


def repo_fingerprint(snapshot: RepoSnapshot) -> str:
    """Content address of a canonical snapshot."""
    digest = hashlib.sha256()
    for f in snapshot.files:
        path = f.path.encode("utf-8")
        digest.update(str(len(path)).encode("ascii") + b"\x00" + path + b"\x00")
        digest.update(str(len(f.content)).encode("ascii") + b"\x00" + f.content)
    return "sha256:" + digest.hexdigest()
