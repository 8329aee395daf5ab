"""Exception hierarchy for ArcSight."""

from .base import ArcSightError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .taxonomy import (
    FAILURE_CODES,
    AliasAmbiguous,
    CanonicalizationError,
    DeterminismMismatch,
    EngineError,
    ErrorCode,
    GraphIncomplete,
    SchemaUpgradeFailure,
    TimeoutExceeded,
    status_for_code,
)

__all__ = [
    "ArcSightError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "EngineError",
    "ErrorCode",
    "FAILURE_CODES",
    "status_for_code",
    "CanonicalizationError",
    "AliasAmbiguous",
    "GraphIncomplete",
    "TimeoutExceeded",
    "DeterminismMismatch",
    "SchemaUpgradeFailure",
]
