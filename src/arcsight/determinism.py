"""Repeated-run determinism check for tests and CI.

Not part of the runtime path: the runtime trusts one run and compares
signatures across pushes instead.
"""

from __future__ import annotations

import time
from typing import Any

from .api import analyze
from .config import DEFAULT_CONFIG, AnalyzerConfig
from .engine import AnalysisRequest
from .envelope.canonical import canonical_bytes
from .exceptions import DeterminismMismatch
from .safety import Clock


def verify_determinism(
    request: AnalysisRequest,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    runs: int = 3,
    *,
    clock: Clock = time.monotonic,
) -> dict[str, Any]:
    """Analyze ``request`` ``runs`` times and return the envelope.

    Raises:
        DeterminismMismatch: If any run differs from the first, signature or
            canonical bytes
        ValueError: If ``runs`` is less than 2
    """
    if runs < 2:
        raise ValueError("runs must be at least 2")

    first = analyze(request, config, clock=clock)
    first_bytes = canonical_bytes(first)
    for run in range(2, runs + 1):
        envelope = analyze(request, config, clock=clock)
        if canonical_bytes(envelope) != first_bytes:
            raise DeterminismMismatch(
                "repeated analysis produced a different envelope",
                context={
                    "run": run,
                    "expected": first["meta"]["signature"],
                    "actual": envelope["meta"]["signature"],
                },
            )
    return first
