"""Envelope construction and signing.

An envelope is built once per analysis call, signed once, and never edited
afterwards. Silent and error envelopes collapse every variable field to a
constant, so two silent calls with the same static input are identical no
matter how far the analysis got before the switch tripped.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping, Optional, Sequence

from ..attribution.models import AttributedCycle
from ..config import AnalyzerConfig
from ..confidence.evaluator import ConfidenceReport
from ..exceptions import ErrorCode, status_for_code
from ..graph.models import GraphStats
from ..schema import ENVELOPE_SCHEMA_VERSION
from .canonical import digest

SUCCESS = "success"
DEGRADED = "degraded"
SILENT = "silent"
ERROR = "error"

STATUSES = (SUCCESS, DEGRADED, SILENT, ERROR)


def resolve_status(
    cycles: Sequence[AttributedCycle],
    confidence: Optional[ConfidenceReport],
    error_code: Optional[ErrorCode] = None,
) -> str:
    """Status of an envelope.

    An error code decides on its own. Without one, attributed cycles give
    ``success`` at full confidence and ``degraded`` below it; no cycles
    means nothing to say, which is ``silent``.
    """
    if error_code is not None:
        return status_for_code(error_code)
    if not cycles or confidence is None:
        return SILENT
    return SUCCESS if confidence.score >= 1.0 else DEGRADED


def build_envelope(
    cycles: Sequence[AttributedCycle],
    confidence: Optional[ConfidenceReport],
    status: Optional[str],
    config: AnalyzerConfig,
    identity: Mapping[str, Any],
    *,
    analyzer_version: str,
    error_code: Optional[ErrorCode] = None,
    graph_stats: Optional[GraphStats] = None,
    repo_fingerprint: Optional[str] = None,
    extensions: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Assemble an unsigned envelope.

    ``status`` may be None to derive it with ``resolve_status``. Silent and
    error envelopes drop cycles, graph stats, extensions and the repository
    fingerprint.

    Raises:
        ValueError: On an unknown status, or cycles on a non-emitting status
    """
    if status is None:
        status = resolve_status(cycles, confidence, error_code)
    if status not in STATUSES:
        raise ValueError(f"unknown status {status!r}")

    emitting = status in (SUCCESS, DEGRADED)
    if not emitting:
        cycles = ()
        graph_stats = None
        repo_fingerprint = None
        extensions = None
    elif not cycles:
        raise ValueError(f"status {status!r} requires at least one cycle")

    return {
        "version": {
            "analyzer": analyzer_version,
            "schema": ENVELOPE_SCHEMA_VERSION,
            "rulepack": config.rulepack_version,
        },
        "identity": copy.deepcopy(dict(identity)),
        "core": {
            "cycles": [c.to_dict() for c in sorted(cycles, key=lambda c: c.cycle.sort_key)],
            "status": status,
            "error_code": error_code.value if error_code is not None else None,
            "limits": config.limits_snapshot(),
            "graph_stats": (graph_stats or GraphStats()).to_dict(),
        },
        "extensions": dict(extensions or {}),
        "meta": {
            "config_snapshot_hash": config_snapshot_hash(config),
            "repo_fingerprint": repo_fingerprint,
            "sandbox_policy_version": config.sandbox_policy_version,
            "signature": None,
        },
    }


def silent_envelope(
    config: AnalyzerConfig,
    identity: Mapping[str, Any],
    *,
    analyzer_version: str,
    error_code: Optional[ErrorCode] = None,
) -> dict[str, Any]:
    """The signed constant no-signal envelope for ``error_code``."""
    status = status_for_code(error_code) if error_code is not None else SILENT
    envelope = build_envelope(
        (),
        None,
        status,
        config,
        identity,
        analyzer_version=analyzer_version,
        error_code=error_code,
    )
    return sign_envelope(envelope)


def signature_of(envelope: Mapping[str, Any]) -> str:
    """Digest of an envelope with ``meta.signature`` left out."""
    unsigned = dict(envelope)
    meta = dict(unsigned.get("meta") or {})
    meta.pop("signature", None)
    unsigned["meta"] = meta
    return digest(unsigned)


def sign_envelope(envelope: Mapping[str, Any]) -> dict[str, Any]:
    """Return a signed copy of ``envelope``."""
    signed = copy.deepcopy(dict(envelope))
    signed.setdefault("meta", {})["signature"] = signature_of(envelope)
    return signed


def verify_signature(envelope: Mapping[str, Any]) -> bool:
    meta = envelope.get("meta") or {}
    return meta.get("signature") == signature_of(envelope)


def config_snapshot_hash(config: AnalyzerConfig) -> str:
    return digest(config.snapshot())
