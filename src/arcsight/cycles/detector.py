"""Enumeration of short simple cycles in the import graph."""

from __future__ import annotations

from typing import Callable, Iterator, Optional

from ..graph.algorithms import component_index
from ..graph.models import ImportGraph
from .models import Cycle, canonical_cycle


def detect_cycles(
    graph: ImportGraph,
    max_length: int = 5,
    min_length: int = 2,
    checkpoint: Optional[Callable[[], None]] = None,
) -> tuple[Cycle, ...]:
    """Find every simple cycle with ``min_length <= length <= max_length``.

    Only nodes of multi-node strongly connected components can lie on a
    cycle, so the search is confined to them. For each start node, taken in
    sorted order, a depth-bounded DFS walks only to nodes of the same
    component that sort after the start. Every simple cycle is therefore
    found exactly once, already in canonical rotation. Longer cycles are
    left out entirely, never truncated.

    ``checkpoint`` is called once per start node (used for the deadline).
    """
    membership = component_index(graph)
    found: dict[str, Cycle] = {}

    for start in graph.nodes:
        component = membership.get(start)
        if component is None:
            continue
        if checkpoint is not None:
            checkpoint()

        path = [start]
        on_path = {start}
        stack: list[Iterator[str]] = [iter(graph.successors(start))]

        while stack:
            advanced = False
            for w in stack[-1]:
                if w == start:
                    if len(path) >= min_length:
                        _record(found, path)
                    continue
                if w in on_path or w < start or membership.get(w) != component:
                    continue
                if len(path) >= max_length:
                    continue
                path.append(w)
                on_path.add(w)
                stack.append(iter(graph.successors(w)))
                advanced = True
                break

            if not advanced:
                stack.pop()
                on_path.discard(path.pop())

    return tuple(sorted(found.values(), key=lambda c: c.sort_key))


def _record(found: dict[str, Cycle], path: list[str]) -> None:
    if canonical_cycle(path) is None:
        return
    cycle = Cycle(path)
    found.setdefault(cycle.canonical, cycle)
