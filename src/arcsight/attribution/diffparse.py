"""Build a PRDiff from ``git diff -U0 -M`` output."""

from __future__ import annotations

import re
from typing import Optional

from .models import PRDiff

_HUNK_RE = re.compile(r"^@@ -\d+(?:,(?P<old>\d+))? \+(?P<start>\d+)(?:,(?P<new>\d+))? @@")
_DEV_NULL = "/dev/null"

# git C-quotes unusual paths: "b/caf\303\251.ts"
_ESCAPE_RE = re.compile(r"\\([0-3][0-7]{2}|.)")
_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13}


def parse_unified_diff(text: str) -> PRDiff:
    """Parse a unified diff into changed files, added lines and renames.

    Line numbers of added lines refer to the new revision. Renamed files
    count as changed under both names. Hunk line counts decide where a hunk
    ends, so file headers of plain (non-git) diffs are read correctly too.
    """
    changed: set[str] = set()
    added: set[tuple[str, int]] = set()
    renames: list[tuple[str, str]] = []

    old_path: Optional[str] = None
    new_path: Optional[str] = None
    rename_from: Optional[str] = None
    line_no = 0
    old_left = new_left = 0

    for raw in text.splitlines():
        if old_left > 0 or new_left > 0:
            if raw.startswith("+"):
                if new_path and new_path != _DEV_NULL:
                    added.add((new_path, line_no))
                line_no += 1
                new_left -= 1
            elif raw.startswith("-"):
                old_left -= 1
            elif raw.startswith(" "):
                line_no += 1
                old_left -= 1
                new_left -= 1
            elif not raw.startswith("\\"):
                old_left = new_left = 0
            else:
                continue
            if old_left > 0 or new_left > 0 or raw.startswith(("+", "-", " ")):
                continue

        if raw.startswith("diff --git "):
            old_path = new_path = rename_from = None
        elif raw.startswith("rename from "):
            rename_from = _strip_path(raw[len("rename from "):], prefix=None)
        elif raw.startswith("rename to ") and rename_from is not None:
            rename_to = _strip_path(raw[len("rename to "):], prefix=None)
            renames.append((rename_from, rename_to))
            changed.update((rename_from, rename_to))
        elif raw.startswith("--- "):
            old_path = _strip_path(raw[4:], prefix="a/")
        elif raw.startswith("+++ "):
            new_path = _strip_path(raw[4:], prefix="b/")
            target = new_path if new_path != _DEV_NULL else old_path
            if target and target != _DEV_NULL:
                changed.add(target)
        else:
            match = _HUNK_RE.match(raw)
            if match:
                line_no = int(match.group("start"))
                old_left = int(match.group("old") or 1)
                new_left = int(match.group("new") or 1)

    return PRDiff.create(changed_files=changed, added_import_lines=added, renamed_files=renames)


def _strip_path(value: str, prefix: Optional[str]) -> str:
    value = value.split("\t", 1)[0]
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = _unquote(value[1:-1])
    if prefix and value.startswith(prefix):
        value = value[len(prefix):]
    return value


def _unquote(value: str) -> str:
    """Decode the backslash escapes of a git C-quoted path."""
    out = bytearray()
    pos = 0
    for match in _ESCAPE_RE.finditer(value):
        out += value[pos:match.start()].encode("utf-8")
        escape = match.group(1)
        if len(escape) == 3:
            out.append(int(escape, 8))
        else:
            out += bytes([_ESCAPES[escape]]) if escape in _ESCAPES else escape.encode("utf-8")
        pos = match.end()
    out += value[pos:].encode("utf-8")
    return out.decode("utf-8", "replace")
