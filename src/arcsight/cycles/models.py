"""Canonical cycle representation.

A cycle is stored rotated so that its lexicographically smallest path comes
first. Two cycles are equal exactly when their canonical strings are equal,
and lists of cycles sort by (length, canonical string).
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

SEPARATOR = " -> "


def canonical_cycle(nodes: Sequence[str]) -> Optional[tuple[str, ...]]:
    """Rotate a node sequence to start at its smallest node.

    Returns None for invalid sequences: fewer than two nodes, or a node
    repeated before the loop closes.
    """
    if len(nodes) < 2 or len(set(nodes)) != len(nodes):
        return None
    start = nodes.index(min(nodes))
    return tuple(nodes[start:]) + tuple(nodes[:start])


class Cycle:
    """A closed import loop in canonical rotation."""

    __slots__ = ("nodes", "canonical")

    def __init__(self, nodes: Sequence[str]) -> None:
        rotated = canonical_cycle(nodes)
        if rotated is None:
            raise ValueError(f"not a simple cycle: {list(nodes)!r}")
        self.nodes: tuple[str, ...] = rotated
        self.canonical: str = SEPARATOR.join(rotated)

    @classmethod
    def parse(cls, canonical: str) -> "Cycle":
        return cls(canonical.split(SEPARATOR))

    @property
    def length(self) -> int:
        return len(self.nodes)

    @property
    def sort_key(self) -> tuple[int, str]:
        return (len(self.nodes), self.canonical)

    def edges(self) -> tuple[tuple[str, str], ...]:
        """Consecutive (source, target) pairs, closing edge last."""
        n = len(self.nodes)
        return tuple((self.nodes[i], self.nodes[(i + 1) % n]) for i in range(n))

    def rename(self, renames: Mapping[str, str]) -> Optional["Cycle"]:
        """The same loop after file moves; None if the moves merge two nodes."""
        moved = [renames.get(node, node) for node in self.nodes]
        if canonical_cycle(moved) is None:
            return None
        return Cycle(moved)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cycle):
            return NotImplemented
        return self.canonical == other.canonical

    def __hash__(self) -> int:
        return hash(self.canonical)

    def __lt__(self, other: "Cycle") -> bool:
        return self.sort_key < other.sort_key

    def __repr__(self) -> str:
        return f"Cycle({self.canonical!r})"
