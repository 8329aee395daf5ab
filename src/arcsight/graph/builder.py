"""Import graph construction from a canonical snapshot."""

from __future__ import annotations

from types import MappingProxyType
from typing import Optional

from ..config import AliasConfig, Limits
from ..exceptions import AliasAmbiguous, GraphIncomplete
from ..logging_config import get_logger
from ..scanning.imports import ScanResult, scan_file
from ..scanning.treesitter_parser import TreeSitterParser
from ..snapshot.models import RepoSnapshot
from .aliases import AMBIGUOUS, EXTERNAL, RESOLVED, UNRESOLVED, AliasResolver
from .models import AliasStats, GraphBuildResult, ImportEdge, ImportGraph, SegmentationStats

logger = get_logger(__name__)


def build_graph(
    snapshot: RepoSnapshot,
    alias_config: AliasConfig,
    limits: Optional[Limits] = None,
) -> GraphBuildResult:
    """Build the import graph of a snapshot.

    Nodes are all source files plus any non-source file that is imported
    (stylesheets, JSON). Type-only imports, external packages and
    self-imports produce no edge; unresolved relative imports are counted
    in the alias statistics.

    Raises:
        AliasAmbiguous: If any internal import resolves to zero (alias) or
            several candidate files
        GraphIncomplete: If the snapshot or graph exceeds the size limits
    """
    limits = limits or Limits()
    if len(snapshot) > limits.max_files:
        raise GraphIncomplete(
            "snapshot exceeds max_files",
            context={"files": len(snapshot), "max_files": limits.max_files},
        )

    resolver = AliasResolver(snapshot.paths, alias_config)
    parser = TreeSitterParser()
    scans: list[ScanResult] = []
    for source in snapshot:
        scan = scan_file(source, parser)
        if scan is not None:
            scans.append(scan)

    nodes: set[str] = {s.path for s in scans}
    edges: set[ImportEdge] = set()
    attempted = resolved = unresolved = 0

    for scan in scans:
        for decl in scan.imports:
            if decl.is_type_only:
                continue
            resolution = resolver.resolve(scan.path, scan.language, decl)
            if resolution.status == EXTERNAL:
                continue
            attempted += 1
            if resolution.status == AMBIGUOUS:
                logger.debug(
                    "Ambiguous import %r in %s:%d -> %s",
                    decl.specifier, scan.path, decl.line, list(resolution.candidates),
                )
                raise AliasAmbiguous(
                    f"import {decl.specifier!r} does not resolve to exactly one file",
                    context={
                        "path": scan.path,
                        "line": decl.line,
                        "specifier": decl.specifier,
                        "candidates": list(resolution.candidates),
                    },
                )
            if resolution.status == UNRESOLVED:
                unresolved += 1
                continue
            if resolution.status == RESOLVED:
                resolved += 1
                for target in resolution.targets:
                    if target != scan.path:
                        edges.add(ImportEdge(scan.path, target, decl.line))
                        nodes.add(target)

    graph = _assemble(nodes, edges)
    stats = graph.stats()
    if stats.edge_count > limits.max_edges:
        raise GraphIncomplete(
            "graph exceeds max_edges",
            context={"edges": stats.edge_count, "max_edges": limits.max_edges},
        )

    logger.debug(
        "Graph built: %d nodes, %d edges, %d/%d imports resolved",
        stats.node_count, stats.edge_count, resolved, attempted,
    )
    return GraphBuildResult(
        graph=graph,
        alias_stats=AliasStats(attempted=attempted, resolved=resolved, unresolved=unresolved),
        segmentation=SegmentationStats.from_scans(tuple(scans)),
    )


def _assemble(nodes: set[str], edges: set[ImportEdge]) -> ImportGraph:
    """Freeze nodes and edges into sorted, read-only adjacency."""
    ordered_nodes = tuple(sorted(nodes))
    outgoing: dict[str, list[ImportEdge]] = {n: [] for n in ordered_nodes}
    for edge in sorted(edges):
        if edge.target not in outgoing:
            raise GraphIncomplete("edge target is not a node", context={"target": edge.target})
        outgoing[edge.source].append(edge)
    adjacency = {
        node: tuple(sorted(outgoing[node], key=lambda e: (e.target, e.line)))
        for node in ordered_nodes
    }
    return ImportGraph(nodes=ordered_nodes, adjacency=MappingProxyType(adjacency))
