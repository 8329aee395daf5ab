"""Repository snapshots: raw input, canonicalization, fingerprints."""

from .canonicalize import canonical_path, canonicalize, normalize_content, repo_fingerprint
from .models import RawFile, RepoSnapshot, SourceFile

__all__ = [
    "RawFile",
    "RepoSnapshot",
    "SourceFile",
    "canonical_path",
    "canonicalize",
    "normalize_content",
    "repo_fingerprint",
]
