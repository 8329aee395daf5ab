"""Import graph: resolution, construction, component analysis."""

from .aliases import AliasResolver, Resolution
from .algorithms import component_index, tarjan_scc
from .builder import build_graph
from .models import (
    AliasStats,
    GraphBuildResult,
    GraphStats,
    ImportEdge,
    ImportGraph,
    SegmentationStats,
)

__all__ = [
    "AliasResolver",
    "AliasStats",
    "GraphBuildResult",
    "GraphStats",
    "ImportEdge",
    "ImportGraph",
    "Resolution",
    "SegmentationStats",
    "build_graph",
    "component_index",
    "tarjan_scc",
]
