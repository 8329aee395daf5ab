"""
ArcSight - Deterministic Dependency-Cycle Analyzer

Finds the import cycles a pull request introduces, attributes each one to
the import line that closed it, and reports them in a signed, versioned
envelope. Silent whenever it is not sure.
"""

__version__ = "1.0.0"

from .api import analyze, compare_reports
from .attribution import PRDiff, parse_unified_diff
from .config import DEFAULT_CONFIG, AnalyzerConfig, load_config
from .engine import AnalysisRequest
from .envelope import render_comment
from .snapshot import RawFile

__all__ = [
    "analyze",  # Main entry point
    "compare_reports",
    "render_comment",
    "AnalysisRequest",
    "AnalyzerConfig",
    "DEFAULT_CONFIG",
    "PRDiff",
    "RawFile",
    "load_config",
    "parse_unified_diff",
]
