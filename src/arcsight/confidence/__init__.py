"""Confidence evaluation and monorepo detection."""

from .evaluator import ConfidenceReport, confidence_gate, evaluate_confidence
from .monorepo import MonorepoPredicate, detect_monorepo

__all__ = [
    "ConfidenceReport",
    "MonorepoPredicate",
    "confidence_gate",
    "detect_monorepo",
    "evaluate_confidence",
]
