"""Public API for ArcSight.

Callers hand over raw files, a PR diff and identity fields, and always get
back a signed envelope. The wall clock is read here and nowhere else.

Example:
    >>> from arcsight import AnalysisRequest, RawFile, PRDiff, analyze
    >>>
    >>> request = AnalysisRequest(
    ...     head=(RawFile("src/a.ts", b"import './b'\\n"), RawFile("src/b.ts", b"")),
    ...     diff=PRDiff.create(changed_files=["src/a.ts"], added_import_lines=[("src/a.ts", 1)]),
    ...     identity={"repo": "acme/web", "pr": 42},
    ... )
    >>> envelope = analyze(request)
    >>> envelope["core"]["status"]
    'silent'
"""

from __future__ import annotations

import time
from typing import Any, Iterable, Mapping, Optional

from . import __version__
from .attribution import ReportDelta, report_delta
from .config import DEFAULT_CONFIG, AnalyzerConfig
from .confidence import MonorepoPredicate
from .engine import AnalysisRequest, run_analysis
from .rulepacks import Rulepack
from .safety import Clock
from .schema import upgrade_envelope


def analyze(
    request: AnalysisRequest,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    *,
    clock: Clock = time.monotonic,
    rulepacks: Iterable[Rulepack] = (),
    monorepo_predicate: Optional[MonorepoPredicate] = None,
) -> dict[str, Any]:
    """Analyze one pull request.

    Args:
        request: Head and base files, the PR diff and caller identity
        config: Static analyzer configuration
        clock: Monotonic clock used for the deadline
        rulepacks: Optional extension producers
        monorepo_predicate: Replaces the default monorepo detection

    Returns:
        Signed envelope as plain JSON data. ``core.status`` tells the caller
        whether it may act on it; only ``success`` and ``degraded`` carry
        cycles.
    """
    return run_analysis(
        request,
        config,
        clock,
        analyzer_version=__version__,
        rulepacks=rulepacks,
        monorepo_predicate=monorepo_predicate,
    )


def compare_reports(
    previous: Optional[Mapping[str, Any]], current: Mapping[str, Any]
) -> ReportDelta:
    """Decide whether a new envelope changes what the PR comment says.

    ``previous`` may be of an older envelope schema; it is upgraded first.

    Raises:
        SchemaUpgradeFailure: If ``previous`` cannot be upgraded
    """
    if previous is not None:
        previous = upgrade_envelope(previous)
    return report_delta(previous, current)
