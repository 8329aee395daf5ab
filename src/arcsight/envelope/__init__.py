"""Envelope construction, canonical serialization, signing and rendering."""

from .builder import (
    DEGRADED,
    ERROR,
    SILENT,
    SUCCESS,
    build_envelope,
    config_snapshot_hash,
    resolve_status,
    sign_envelope,
    signature_of,
    silent_envelope,
    verify_signature,
)
from .canonical import canonical_bytes, canonical_json, digest
from .comment import comment_fingerprint, render_comment

__all__ = [
    "DEGRADED",
    "ERROR",
    "SILENT",
    "SUCCESS",
    "build_envelope",
    "canonical_bytes",
    "canonical_json",
    "comment_fingerprint",
    "config_snapshot_hash",
    "digest",
    "render_comment",
    "resolve_status",
    "sign_envelope",
    "signature_of",
    "silent_envelope",
    "verify_signature",
]
