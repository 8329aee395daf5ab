"""PR comment rendering.

The comment is a fixed template; its hidden marker lets the runtime find and
update the single comment it owns on a pull request.
"""

from __future__ import annotations

import hashlib
from typing import Any, Mapping, Optional

MARKER_TEMPLATE = "<!-- arcsight:fingerprint={} -->"


def comment_fingerprint(envelope: Mapping[str, Any]) -> str:
    """Hash over the sorted cycle fingerprints of an envelope."""
    cycles = envelope.get("core", {}).get("cycles", [])
    fingerprints = sorted(str(c.get("fingerprint") or "") for c in cycles)
    return hashlib.sha256("\n".join(fingerprints).encode("utf-8")).hexdigest()[:16]


def render_comment(envelope: Mapping[str, Any]) -> Optional[str]:
    """Markdown comment for an emitting envelope, None otherwise."""
    core = envelope.get("core", {})
    cycles = core.get("cycles", [])
    if core.get("status") not in ("success", "degraded") or not cycles:
        return None

    noun = "cycle" if len(cycles) == 1 else "cycles"
    lines = [
        MARKER_TEMPLATE.format(comment_fingerprint(envelope)),
        f"### ArcSight: {len(cycles)} new import {noun}",
        "",
    ]
    for entry in cycles:
        root = entry["root_cause"]
        lines.append(f"- `{entry['cycle']} -> {entry['nodes'][0]}`")
        lines.append(f"  closed by `{root['from']}` line {root['line']} importing `{root['to']}`")
    if core.get("status") == "degraded":
        lines.extend(["", "_Some files could not be fully analyzed; results may be incomplete._"])
    return "\n".join(lines) + "\n"
