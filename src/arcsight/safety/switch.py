"""Silence-first safety switch and the per-call deadline.

The switch starts ACTIVE. The first failure or silence trigger flips it to
SILENT and records its code; later trips never overwrite that code. Once
silent, the envelope is the constant no-signal envelope for the call.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..exceptions import ArcSightError, EngineError, ErrorCode, TimeoutExceeded
from ..logging_config import get_logger

logger = get_logger(__name__)

ACTIVE = "active"
SILENT = "silent"

Clock = Callable[[], float]


class SafetySwitch:
    """One-way switch from ACTIVE to SILENT.

    Usage:
        switch = SafetySwitch()
        with switch.guard():
            ...  # any exception trips the switch instead of propagating
        if switch.is_silent:
            ...
    """

    def __init__(self) -> None:
        self._state = ACTIVE
        self._code: Optional[ErrorCode] = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_silent(self) -> bool:
        return self._state == SILENT

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self._code

    def trip(self, code: ErrorCode) -> None:
        """Go silent with ``code``; the first recorded code is kept."""
        if self._state == SILENT:
            logger.debug("Switch already silent (%s); ignoring %s", self._code, code.value)
            return
        self._state = SILENT
        self._code = code
        logger.debug("Switch tripped: %s", code.value)

    @contextmanager
    def guard(self) -> Iterator["SafetySwitch"]:
        """Run a block; convert every exception into a trip."""
        try:
            yield self
        except EngineError as e:
            logger.debug("Engine error: %s", e.to_json())
            self.trip(e.code)
        except ArcSightError as e:
            logger.debug("Unexpected ArcSight error: %s", e)
            self.trip(ErrorCode.INTERNAL_ERROR)
        except Exception:
            logger.debug("Internal error during analysis", exc_info=True)
            self.trip(ErrorCode.INTERNAL_ERROR)


class Deadline:
    """Coarse wall-clock budget, checked at stage boundaries.

    The clock is injected so that the engine itself never reads time.
    """

    def __init__(self, clock: Clock, budget_seconds: float) -> None:
        self._clock = clock
        self._budget = budget_seconds
        self._start = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._start

    def check(self, stage: str = "") -> None:
        """Raise TimeoutExceeded once the budget is spent."""
        elapsed = self.elapsed
        if elapsed > self._budget:
            raise TimeoutExceeded(
                "analysis exceeded its time budget",
                context={"stage": stage, "budget_seconds": self._budget},
            )
