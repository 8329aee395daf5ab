"""Forward-only schema migration for envelopes and analyzer configs.

Each step is a pure function ``(obj) -> obj`` registered under
``(kind, from_version, to_version)`` with ``to_version == from_version + 1``.
``adapt`` composes the steps in version order. Steps only add optional
fields with fixed defaults; no existing field changes meaning and a
downgrade is never possible.

Envelope history:
    1 -> 2  adds ``extensions`` and ``meta.sandbox_policy_version``
    2 -> 3  adds ``core.error_code`` and a ``fingerprint`` on each cycle

Config history:
    1 -> 2  adds ``confidence.weights``
    2 -> 3  adds ``monorepo.markers``
"""

from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Callable, Mapping

from ..exceptions import SchemaUpgradeFailure

Step = Callable[[dict[str, Any]], dict[str, Any]]

ENVELOPE = "envelope"
CONFIG = "config"

ENVELOPE_SCHEMA_VERSION = 3


# ── Envelope steps ───────────────────────────────────────────────────


def envelope_v1_to_v2(obj: dict[str, Any]) -> dict[str, Any]:
    """Add the rulepack extension slot and the sandbox policy version."""
    out = _envelope_copy(obj, 1)
    out.setdefault("extensions", {})
    out["meta"].setdefault("sandbox_policy_version", "sp-1")
    out["version"]["schema"] = 2
    return out


def envelope_v2_to_v3(obj: dict[str, Any]) -> dict[str, Any]:
    """Add ``core.error_code`` and per-cycle fingerprints (both null)."""
    out = _envelope_copy(obj, 2)
    core = out["core"]
    core.setdefault("error_code", None)
    cycles = core.get("cycles", [])
    if not isinstance(cycles, list):
        raise SchemaUpgradeFailure("core.cycles must be a list", context={"step": "2->3"})
    for entry in cycles:
        if not isinstance(entry, dict):
            raise SchemaUpgradeFailure("cycle entries must be objects", context={"step": "2->3"})
        entry.setdefault("fingerprint", None)
    out["version"]["schema"] = 3
    return out


# ── Config steps ─────────────────────────────────────────────────────


def config_v1_to_v2(obj: dict[str, Any]) -> dict[str, Any]:
    """Add confidence weights with the values version 1 used implicitly."""
    out = _config_copy(obj, 1)
    confidence = _table(out, "confidence")
    confidence.setdefault("weights", {"segmentation": 0.5, "alias": 0.4, "size": 0.1})
    out["schema_version"] = 2
    return out


def config_v2_to_v3(obj: dict[str, Any]) -> dict[str, Any]:
    """Add workspace markers for the default monorepo predicate."""
    out = _config_copy(obj, 2)
    monorepo = _table(out, "monorepo")
    monorepo.setdefault(
        "markers",
        ["lerna.json", "nx.json", "pnpm-workspace.yaml", "rush.json", "turbo.json"],
    )
    out["schema_version"] = 3
    return out


STEPS: Mapping[tuple[str, int, int], Step] = MappingProxyType(
    {
        (ENVELOPE, 1, 2): envelope_v1_to_v2,
        (ENVELOPE, 2, 3): envelope_v2_to_v3,
        (CONFIG, 1, 2): config_v1_to_v2,
        (CONFIG, 2, 3): config_v2_to_v3,
    }
)


def adapt(obj: Mapping[str, Any], kind: str, from_version: int, to_version: int) -> dict[str, Any]:
    """Upgrade ``obj`` of ``kind`` from ``from_version`` to ``to_version``.

    The input is never mutated. Upgrading to the same version returns a
    deep copy.

    Raises:
        SchemaUpgradeFailure: On downgrade, unknown kind or version, a
            missing step, or input that does not match ``from_version``
    """
    if kind not in (ENVELOPE, CONFIG):
        raise SchemaUpgradeFailure(f"unknown schema kind {kind!r}", context={"kind": kind})
    if not isinstance(obj, Mapping):
        raise SchemaUpgradeFailure("input must be an object", context={"kind": kind})
    if to_version < from_version:
        raise SchemaUpgradeFailure(
            "downgrade is not supported",
            context={"kind": kind, "from": from_version, "to": to_version},
        )

    current: dict[str, Any] = copy.deepcopy(dict(obj))
    for version in range(from_version, to_version):
        step = STEPS.get((kind, version, version + 1))
        if step is None:
            raise SchemaUpgradeFailure(
                f"no {kind} migration from v{version}",
                context={"kind": kind, "from": version, "to": version + 1},
            )
        current = step(current)
    return current


def upgrade_envelope(envelope: Mapping[str, Any]) -> dict[str, Any]:
    """Upgrade an envelope of any known version to the current schema."""
    version = envelope.get("version") if isinstance(envelope, Mapping) else None
    schema = version.get("schema") if isinstance(version, Mapping) else None
    if not isinstance(schema, int) or isinstance(schema, bool):
        raise SchemaUpgradeFailure("envelope has no integer version.schema")
    return adapt(envelope, ENVELOPE, schema, ENVELOPE_SCHEMA_VERSION)


# ── Private helpers ──────────────────────────────────────────────────


def _envelope_copy(obj: Mapping[str, Any], expected: int) -> dict[str, Any]:
    out = copy.deepcopy(dict(obj))
    for key in ("version", "core", "meta"):
        if not isinstance(out.get(key), dict):
            raise SchemaUpgradeFailure(
                f"envelope is missing the {key!r} object", context={"from": expected}
            )
    if out["version"].get("schema") != expected:
        raise SchemaUpgradeFailure(
            "envelope version does not match the migration step",
            context={"expected": expected, "found": out["version"].get("schema")},
        )
    return out


def _config_copy(obj: Mapping[str, Any], expected: int) -> dict[str, Any]:
    out = copy.deepcopy(dict(obj))
    found = out.get("schema_version", 1)
    if found != expected:
        raise SchemaUpgradeFailure(
            "config version does not match the migration step",
            context={"expected": expected, "found": found},
        )
    return out


def _table(obj: dict[str, Any], key: str) -> dict[str, Any]:
    table = obj.setdefault(key, {})
    if not isinstance(table, dict):
        raise SchemaUpgradeFailure(f"{key!r} must be a table", context={"key": key})
    return table
