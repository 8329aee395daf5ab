"""Data models for the import graph.

Edges are directed: an edge A -> B means file A imports file B. Every
collection here is built in sorted order and exposed read-only; downstream
stages never mutate the graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from ..scanning.imports import ScanResult


@dataclass(frozen=True, order=True)
class ImportEdge:
    """One resolved import statement.

    Ordering is (source, target, line), which is also the tie-break order
    used when picking a root-cause edge.
    """

    source: str
    target: str
    line: int
    is_type_only: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.source, "to": self.target, "line": self.line}


@dataclass(frozen=True)
class GraphStats:
    """Structure-only graph statistics, independent of traversal order."""

    node_count: int = 0
    edge_count: int = 0
    avg_fan_out: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "avg_fan_out": self.avg_fan_out,
        }


@dataclass(frozen=True)
class AliasStats:
    """Outcome counts of internal import resolution.

    External imports (packages, stdlib) are not attempted and not counted.
    """

    attempted: int = 0
    resolved: int = 0
    unresolved: int = 0
    ambiguous: int = 0

    @property
    def ratio(self) -> float:
        """Resolution success ratio; 1.0 when nothing was attempted."""
        if self.attempted == 0:
            return 1.0
        return self.resolved / self.attempted

    @property
    def fully_unambiguous(self) -> bool:
        return self.ambiguous == 0


@dataclass(frozen=True)
class ImportGraph:
    """Adjacency of the import graph.

    ``adjacency[path]`` is sorted by (target, line). A pair of files may be
    joined by several edges when the same file is imported on several lines.
    """

    nodes: tuple[str, ...] = ()
    adjacency: Mapping[str, tuple[ImportEdge, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def edges_from(self, path: str) -> tuple[ImportEdge, ...]:
        return self.adjacency.get(path, ())

    def edges_between(self, source: str, target: str) -> tuple[ImportEdge, ...]:
        return tuple(e for e in self.edges_from(source) if e.target == target)

    def successors(self, path: str) -> tuple[str, ...]:
        """Distinct import targets of ``path``, sorted."""
        seen: list[str] = []
        for edge in self.edges_from(path):
            if not seen or seen[-1] != edge.target:
                seen.append(edge.target)
        return tuple(seen)

    def stats(self) -> GraphStats:
        node_count = len(self.nodes)
        edge_count = sum(len(self.successors(n)) for n in self.nodes)
        avg = round(edge_count / node_count, 4) if node_count else 0.0
        return GraphStats(node_count=node_count, edge_count=edge_count, avg_fan_out=avg)


@dataclass(frozen=True)
class SegmentationStats:
    """How many source files the scanner could read."""

    source_files: int = 0
    segmented: int = 0

    @property
    def ratio(self) -> float:
        if self.source_files == 0:
            return 0.0
        return self.segmented / self.source_files

    @classmethod
    def from_scans(cls, scans: tuple[ScanResult, ...]) -> "SegmentationStats":
        return cls(source_files=len(scans), segmented=sum(1 for s in scans if s.segmented))


@dataclass(frozen=True)
class GraphBuildResult:
    """Graph plus the statistics the confidence evaluator may see."""

    graph: ImportGraph
    alias_stats: AliasStats
    segmentation: SegmentationStats
