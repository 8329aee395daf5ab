"""Monorepo detection.

The analyzer stays silent on monorepos: workspace tooling (path mapping per
package, hoisted installs) makes import resolution unreliable from a single
static alias map. The predicate is pluggable; ``detect_monorepo`` is the
default.
"""

from __future__ import annotations

import json
from typing import Callable, Optional

from ..config import MonorepoConfig
from ..snapshot.models import RepoSnapshot

MonorepoPredicate = Callable[[RepoSnapshot], bool]

# Directories whose manifests belong to third-party code
_VENDORED_DIRS = frozenset({"node_modules", "vendor", "third_party", ".git"})


def detect_monorepo(snapshot: RepoSnapshot, config: MonorepoConfig = MonorepoConfig()) -> bool:
    """True when the snapshot looks like a multi-package workspace.

    Signals, any of which is enough:
        - a workspace marker file at the root (``pnpm-workspace.yaml``, ...)
        - a root ``package.json`` declaring ``workspaces``
        - package manifests in two or more non-root directories
    """
    markers = frozenset(config.markers)
    manifests = frozenset(config.manifests)
    manifest_dirs: set[str] = set()

    for source in snapshot:
        directory, _, name = source.path.rpartition("/")
        if not directory:
            if name in markers:
                return True
            if name == "package.json" and _declares_workspaces(source.text):
                return True
            continue
        if name in manifests and not _VENDORED_DIRS.intersection(directory.split("/")):
            manifest_dirs.add(directory)

    return len(manifest_dirs) >= 2


def _declares_workspaces(text: Optional[str]) -> bool:
    if text is None:
        return False
    try:
        manifest = json.loads(text)
    except ValueError:
        return False
    return isinstance(manifest, dict) and bool(manifest.get("workspaces"))
