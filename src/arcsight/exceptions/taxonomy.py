"""Engine error taxonomy with constant error codes.

Every engine error carries a fixed ``ErrorCode``. The Safety Switch turns
any of them into a silent or error Envelope; only the code ever reaches the
output. Messages and context are for logs and tests.

Code families:
    Silence triggers - ambiguity or insufficient evidence, status ``silent``
    Failures         - the analysis could not complete, status ``error``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .base import ArcSightError


class ErrorCode(str, Enum):
    """Constant codes written to ``core.error_code``."""

    # Silence triggers
    ALIAS_AMBIGUOUS = "ALIAS_AMBIGUOUS"
    CANONICALIZATION_COLLISION = "CANONICALIZATION_COLLISION"
    LOW_CONFIDENCE = "LOW_CONFIDENCE"
    INSUFFICIENT_FILES = "INSUFFICIENT_FILES"
    MONOREPO = "MONOREPO"

    # Failures
    GRAPH_INCOMPLETE = "GRAPH_INCOMPLETE"
    TIMEOUT_EXCEEDED = "TIMEOUT_EXCEEDED"
    DETERMINISM_MISMATCH = "DETERMINISM_MISMATCH"
    SCHEMA_UPGRADE_FAILURE = "SCHEMA_UPGRADE_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Codes that produce ``core.status == "error"``; all others produce "silent".
FAILURE_CODES = frozenset(
    {
        ErrorCode.GRAPH_INCOMPLETE,
        ErrorCode.TIMEOUT_EXCEEDED,
        ErrorCode.DETERMINISM_MISMATCH,
        ErrorCode.SCHEMA_UPGRADE_FAILURE,
        ErrorCode.INTERNAL_ERROR,
    }
)


def status_for_code(code: ErrorCode) -> str:
    """Map an error code to the envelope status it produces."""
    return "error" if code in FAILURE_CODES else "silent"


@dataclass(eq=False)
class EngineError(ArcSightError):
    """Base engine exception with structured context.

    Attributes:
        message: Human-readable error description (never emitted)
        code: Constant error code written to the envelope
        context: Additional context (paths, specifiers, counts)
    """

    message: str
    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __post_init__(self) -> None:
        Exception.__init__(self, str(self))
        self.details = {k: str(v) for k, v in self.context.items()}

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
        }


@dataclass(eq=False)
class CanonicalizationError(EngineError):
    """Two raw paths collapse to one canonical path, or a path is unusable."""

    code: ErrorCode = ErrorCode.CANONICALIZATION_COLLISION


@dataclass(eq=False)
class AliasAmbiguous(EngineError):
    """An import resolves to zero or several candidate files."""

    code: ErrorCode = ErrorCode.ALIAS_AMBIGUOUS


@dataclass(eq=False)
class GraphIncomplete(EngineError):
    """The graph could not be built within the configured limits."""

    code: ErrorCode = ErrorCode.GRAPH_INCOMPLETE


@dataclass(eq=False)
class TimeoutExceeded(EngineError):
    """Wall-clock budget for one analysis call was exceeded."""

    code: ErrorCode = ErrorCode.TIMEOUT_EXCEEDED


@dataclass(eq=False)
class DeterminismMismatch(EngineError):
    """Repeated runs over identical input produced different envelopes."""

    code: ErrorCode = ErrorCode.DETERMINISM_MISMATCH


@dataclass(eq=False)
class SchemaUpgradeFailure(EngineError):
    """An envelope or config could not be migrated between versions."""

    code: ErrorCode = ErrorCode.SCHEMA_UPGRADE_FAILURE
