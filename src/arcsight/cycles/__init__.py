"""Cycle detection and canonical representation."""

from .detector import detect_cycles
from .models import SEPARATOR, Cycle, canonical_cycle

__all__ = ["Cycle", "SEPARATOR", "canonical_cycle", "detect_cycles"]
