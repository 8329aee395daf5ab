"""Data models for diff attribution."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Iterable

from ..cycles.models import Cycle
from ..graph.models import ImportEdge
from ..snapshot.canonicalize import canonical_path


@dataclass(frozen=True)
class PRDiff:
    """What a pull request changed.

    Attributes:
        changed_files: Paths touched by the change (new paths for renames)
        added_import_lines: (path, line) pairs of lines the change added,
            numbered in the head revision; lines that are not imports never
            match an edge and are harmless here
        renamed_files: (old_path, new_path) pairs detected by the diff
    """

    changed_files: frozenset[str] = frozenset()
    added_import_lines: frozenset[tuple[str, int]] = frozenset()
    renamed_files: tuple[tuple[str, str], ...] = ()

    @classmethod
    def create(
        cls,
        changed_files: Iterable[str] = (),
        added_import_lines: Iterable[tuple[str, int]] = (),
        renamed_files: Iterable[tuple[str, str]] = (),
    ) -> "PRDiff":
        return cls(
            changed_files=frozenset(changed_files),
            added_import_lines=frozenset((p, int(n)) for p, n in added_import_lines),
            renamed_files=tuple(sorted((old, new) for old, new in renamed_files)),
        )

    def canonicalized(self) -> "PRDiff":
        """The same diff with every path in canonical form.

        Raises:
            CanonicalizationError: If a path is unusable
        """
        return PRDiff(
            changed_files=frozenset(canonical_path(p) for p in self.changed_files),
            added_import_lines=frozenset(
                (canonical_path(p), n) for p, n in self.added_import_lines
            ),
            renamed_files=tuple(
                sorted((canonical_path(old), canonical_path(new)) for old, new in self.renamed_files)
            ),
        )


@dataclass(frozen=True)
class AttributedCycle:
    """A new cycle together with the import that closed it."""

    cycle: Cycle
    root_cause: ImportEdge

    @property
    def report_key(self) -> tuple[str, str, str]:
        """Identity for re-report suppression; line shifts do not count."""
        return (self.cycle.canonical, self.root_cause.source, self.root_cause.target)

    @property
    def fingerprint(self) -> str:
        return report_fingerprint(self.report_key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cycle": self.cycle.canonical,
            "nodes": list(self.cycle.nodes),
            "length": self.cycle.length,
            "root_cause": self.root_cause.to_dict(),
            "fingerprint": self.fingerprint,
        }


def report_fingerprint(key: tuple[str, str, str]) -> str:
    canonical, source, target = key
    payload = f"{canonical}|{source}->{target}".encode("utf-8")
    return hashlib.sha256(payload).hexdigest()[:16]


@dataclass(frozen=True)
class ReportDelta:
    """Difference between the cycles of two consecutive reports."""

    added: tuple[tuple[str, str, str], ...] = ()
    removed: tuple[tuple[str, str, str], ...] = ()
    unchanged: tuple[tuple[str, str, str], ...] = ()

    @property
    def needs_update(self) -> bool:
        return bool(self.added or self.removed)
