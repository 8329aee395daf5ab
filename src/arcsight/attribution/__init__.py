"""Diff attribution: which new cycles the change is responsible for."""

from .diffparse import parse_unified_diff
from .engine import attribute, report_delta, report_keys
from .models import AttributedCycle, PRDiff, ReportDelta, report_fingerprint

__all__ = [
    "AttributedCycle",
    "PRDiff",
    "ReportDelta",
    "attribute",
    "parse_unified_diff",
    "report_delta",
    "report_fingerprint",
    "report_keys",
]
