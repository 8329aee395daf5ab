"""Replay fixtures.

A fixture is a JSON file describing one analysis call::

    {
      "identity": {"repo": "acme/web", "pr": 7},
      "head": {"src/a.ts": "import { b } from './b';\\n", ...},
      "base": {"src/a.ts": "..."} | null,
      "diff": {
        "changed_files": ["src/a.ts"],
        "added_import_lines": [["src/a.ts", 1]],
        "renamed_files": [["src/old.ts", "src/new.ts"]]
      }
    }

File contents are text and encoded as UTF-8.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from .attribution import PRDiff
from .engine import AnalysisRequest
from .exceptions import InvalidConfigError, InvalidPathError
from .snapshot import RawFile

_FIXTURE_KEYS = {"description", "identity", "head", "base", "diff"}


def load_fixture(path: Path) -> AnalysisRequest:
    """Read a fixture file.

    Raises:
        InvalidPathError: If the file is missing or not valid JSON
        InvalidConfigError: If the fixture has the wrong shape
    """
    if not path.is_file():
        raise InvalidPathError(path, "fixture file not found")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise InvalidPathError(path, f"unreadable fixture: {e}")
    return request_from_dict(data)


def request_from_dict(data: Mapping[str, Any]) -> AnalysisRequest:
    if not isinstance(data, Mapping):
        raise InvalidConfigError("fixture", data, "must be an object")
    unknown = sorted(set(data) - _FIXTURE_KEYS)
    if unknown:
        raise InvalidConfigError(unknown[0], data[unknown[0]], "unknown fixture key")
    if "head" not in data:
        raise InvalidConfigError("head", None, "fixture needs a head snapshot")

    diff = data.get("diff") or {}
    if not isinstance(diff, Mapping):
        raise InvalidConfigError("diff", diff, "must be an object")
    try:
        pr_diff = PRDiff.create(
            changed_files=diff.get("changed_files", ()),
            added_import_lines=[(p, n) for p, n in diff.get("added_import_lines", ())],
            renamed_files=[(old, new) for old, new in diff.get("renamed_files", ())],
        )
        return AnalysisRequest(
            head=_files("head", data["head"]),
            base=_files("base", data.get("base")),
            diff=pr_diff,
            identity=dict(data.get("identity") or {}),
        )
    except (TypeError, ValueError) as e:
        raise InvalidConfigError("fixture", "<fixture>", str(e))


def fixture_files(root: Path) -> list[Path]:
    """Fixture files under ``root``, sorted."""
    return sorted(p for p in root.rglob("*.json") if p.is_file())


def _files(key: str, files: Any) -> Optional[tuple[RawFile, ...]]:
    if files is None:
        if key == "head":
            raise InvalidConfigError(key, files, "must be an object")
        return None
    if not isinstance(files, Mapping):
        raise InvalidConfigError(key, files, "must be an object of path -> text")
    out = []
    for path in sorted(files):
        text = files[path]
        if not isinstance(text, str):
            raise InvalidConfigError(f"{key}.{path}", text, "file content must be text")
        out.append(RawFile(path=path, content=text.encode("utf-8")))
    return tuple(out)
