"""Canonical JSON serialization and content digests.

One stringifier for everything that is hashed:
    - object keys sorted (code-point order), recursively
    - arrays whose elements are all objects sorted by their canonical text
    - other arrays keep their order; sets and frozensets are sorted
    - no insignificant whitespace, ASCII-only output
    - NaN and infinities rejected
"""

from __future__ import annotations

import hashlib
import json
import math
from enum import Enum
from typing import Any, Mapping

DIGEST_PREFIX = "sha256:"


def normalize(value: Any) -> Any:
    """Convert ``value`` to plain JSON data in canonical order.

    Raises:
        TypeError: On keys that are not strings or values JSON cannot hold
        ValueError: On non-finite floats
    """
    if isinstance(value, Enum):
        return normalize(value.value)
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"non-finite number in canonical data: {value!r}")
        return value
    if isinstance(value, Mapping):
        out = {}
        for key in sorted(value):
            if not isinstance(key, str):
                raise TypeError(f"object keys must be strings, got {type(key).__name__}")
            out[key] = normalize(value[key])
        return out
    if isinstance(value, (set, frozenset)):
        return [normalize(v) for v in sorted(value)]
    if isinstance(value, (list, tuple)):
        items = [normalize(v) for v in value]
        if items and all(isinstance(v, dict) for v in items):
            items.sort(key=_dumps)
        return items
    raise TypeError(f"cannot serialize {type(value).__name__} canonically")


def canonical_json(value: Any) -> str:
    """Canonical text of ``value``."""
    return _dumps(normalize(value))


def canonical_bytes(value: Any) -> bytes:
    return canonical_json(value).encode("ascii")


def digest(value: Any) -> str:
    """``sha256:<hex>`` over the canonical bytes of ``value``."""
    return DIGEST_PREFIX + hashlib.sha256(canonical_bytes(value)).hexdigest()


def _dumps(value: Any) -> str:
    return json.dumps(
        value, sort_keys=True, separators=(",", ":"), ensure_ascii=True, allow_nan=False
    )
