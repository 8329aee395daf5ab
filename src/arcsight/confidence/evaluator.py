"""Confidence scoring and the emission gate.

The score only looks at how well the repository could be read: the share of
source files the scanner segmented, the share of internal imports that
resolved, and the repository size. It never sees cycles, edges or the diff,
so a PR cannot raise or lower its own confidence by what it changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import ConfidenceConfig
from ..exceptions import ErrorCode
from ..graph.models import AliasStats, SegmentationStats
from ..logging_config import get_logger
from ..scanning.imports import scan_file
from ..scanning.treesitter_parser import TreeSitterParser
from ..snapshot.models import RepoSnapshot
from .monorepo import MonorepoPredicate, detect_monorepo

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConfidenceReport:
    """A confidence score and the inputs it was computed from."""

    score: float
    segmentation_ratio: float
    alias_ratio: float
    source_files: int
    is_monorepo: bool


def evaluate_confidence(
    snapshot: RepoSnapshot,
    alias_stats: AliasStats,
    config: ConfidenceConfig,
    *,
    segmentation: Optional[SegmentationStats] = None,
    is_monorepo: MonorepoPredicate = detect_monorepo,
) -> ConfidenceReport:
    """Score the analysis of ``snapshot``.

    Args:
        snapshot: Canonical head snapshot
        alias_stats: Resolution counts from the graph builder
        config: Threshold and formula weights
        segmentation: Segmentation counts when already known; recomputed
            from the snapshot otherwise
        is_monorepo: Monorepo predicate

    Returns:
        ConfidenceReport with ``score`` in [0, 1], 0.0 without source files
    """
    if segmentation is None:
        segmentation = _segmentation(snapshot)

    n = segmentation.source_files
    if n == 0:
        score = 0.0
    else:
        size_factor = min(1.0, n / config.min_source_files)
        score = (
            config.weight_segmentation * segmentation.ratio
            + config.weight_alias * alias_stats.ratio
            + config.weight_size * size_factor
        )
        score = min(1.0, max(0.0, round(score, 6)))

    return ConfidenceReport(
        score=score,
        segmentation_ratio=round(segmentation.ratio, 6),
        alias_ratio=round(alias_stats.ratio, 6),
        source_files=n,
        is_monorepo=bool(is_monorepo(snapshot)),
    )


def confidence_gate(
    report: ConfidenceReport, alias_stats: AliasStats, config: ConfidenceConfig
) -> Optional[ErrorCode]:
    """Silence code for the first failing check, or None to allow emission.

    Checks run in fixed order: ambiguous aliases, monorepo, too few source
    files, score below threshold.
    """
    code: Optional[ErrorCode] = None
    if alias_stats.ambiguous > 0:
        code = ErrorCode.ALIAS_AMBIGUOUS
    elif report.is_monorepo:
        code = ErrorCode.MONOREPO
    elif report.source_files < config.min_source_files:
        code = ErrorCode.INSUFFICIENT_FILES
    elif report.score < config.threshold:
        code = ErrorCode.LOW_CONFIDENCE

    if code is not None:
        logger.debug("Confidence gate closed: %s (score=%.6f)", code.value, report.score)
    return code


def _segmentation(snapshot: RepoSnapshot) -> SegmentationStats:
    parser = TreeSitterParser()
    scans = [s for s in (scan_file(f, parser) for f in snapshot) if s is not None]
    return SegmentationStats.from_scans(tuple(scans))
