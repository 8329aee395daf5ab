"""Data models for repository snapshots: raw caller input and canonical form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class RawFile:
    """A file as handed over by the caller, before canonicalization."""

    path: str
    content: bytes


@dataclass(frozen=True)
class SourceFile:
    """A canonical file.

    ``content`` is UTF-8 NFC text with ``\\n`` newlines when ``is_text`` is
    true, otherwise the untouched raw bytes.
    """

    path: str
    content: bytes
    is_text: bool

    @property
    def text(self) -> Optional[str]:
        """Decoded content, or None for binary files."""
        if not self.is_text:
            return None
        return self.content.decode("utf-8")


@dataclass(frozen=True)
class RepoSnapshot:
    """Canonical, ordered, immutable view of a repository.

    Files are sorted by path (code-point order) and paths are unique.
    """

    files: tuple[SourceFile, ...] = ()

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(f.path for f in self.files)

    def get(self, path: str) -> Optional[SourceFile]:
        """Look up a file by canonical path (binary search over sorted paths)."""
        lo, hi = 0, len(self.files)
        while lo < hi:
            mid = (lo + hi) // 2
            if self.files[mid].path < path:
                lo = mid + 1
            else:
                hi = mid
        if lo < len(self.files) and self.files[lo].path == path:
            return self.files[lo]
        return None
