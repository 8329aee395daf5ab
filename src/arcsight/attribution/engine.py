"""Attribution of new cycles to the import line that closed them.

A head cycle is reported only when all of these hold:
    1. It is new: absent from the base cycles (after applying renames).
    2. At least one of its nodes is a changed file.
    3. At least one of its edges is new: every import line joining that
       pair of files was added by the change.
    4. One of those new edges starts in a changed file; the smallest by
       (source, target, line) becomes the root-cause edge.

Anything else is dropped without a trace. A cycle that only moved with a
renamed file is not new, and one with no added import line fails rule 3.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..cycles.models import Cycle
from ..graph.models import ImportEdge, ImportGraph
from .models import AttributedCycle, PRDiff, ReportDelta


def attribute(
    base_cycles: Iterable[Cycle],
    head_cycles: Iterable[Cycle],
    pr_diff: PRDiff,
    head_graph: ImportGraph,
) -> tuple[AttributedCycle, ...]:
    """Select the new, attributable head cycles and their root-cause edges."""
    renames = dict(pr_diff.renamed_files)
    known: set[str] = set()
    for cycle in base_cycles:
        known.add(cycle.canonical)
        if renames:
            moved = cycle.rename(renames)
            if moved is not None:
                known.add(moved.canonical)

    attributed = []
    for cycle in head_cycles:
        if cycle.canonical in known:
            continue
        if not any(node in pr_diff.changed_files for node in cycle.nodes):
            continue
        root = _root_cause(cycle, pr_diff, head_graph)
        if root is not None:
            attributed.append(AttributedCycle(cycle=cycle, root_cause=root))

    attributed.sort(key=lambda a: a.cycle.sort_key)
    return tuple(attributed)


def _root_cause(cycle: Cycle, pr_diff: PRDiff, graph: ImportGraph) -> Optional[ImportEdge]:
    new_edges: list[ImportEdge] = []
    for source, target in cycle.edges():
        edges = graph.edges_between(source, target)
        # An older line for the same pair means the change did not create it.
        if edges and all((e.source, e.line) in pr_diff.added_import_lines for e in edges):
            new_edges.append(edges[0])
    candidates = [e for e in new_edges if e.source in pr_diff.changed_files]
    if not candidates:
        return None
    return min(candidates)


def report_keys(envelope: Optional[Mapping[str, Any]]) -> tuple[tuple[str, str, str], ...]:
    """Report keys of the cycles an envelope carries (empty for None)."""
    if not envelope:
        return ()
    keys = set()
    for entry in envelope.get("core", {}).get("cycles", []):
        root = entry.get("root_cause") or {}
        keys.add((entry["cycle"], root.get("from", ""), root.get("to", "")))
    return tuple(sorted(keys))


def report_delta(
    previous: Optional[Mapping[str, Any]], current: Mapping[str, Any]
) -> ReportDelta:
    """Compare the reports of two pushes to the same change.

    The runtime passes the last envelope it acted on. A cycle that vanished
    in between is absent from that envelope, so its return counts as added;
    a cycle now closed by a different edge has a different key and counts
    as added too.
    """
    before = set(report_keys(previous))
    after = set(report_keys(current))
    return ReportDelta(
        added=tuple(sorted(after - before)),
        removed=tuple(sorted(before - after)),
        unchanged=tuple(sorted(after & before)),
    )
