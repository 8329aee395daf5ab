"""Import resolution against the snapshot and the static alias map.

Resolution never guesses: a specifier that could mean more than one file is
ambiguous, and an alias that matches but points at no file is ambiguous too.
A resolver is built per analysis call from the snapshot's paths; nothing is
cached between calls.

Handles:
  - Relative script specifiers: ./b, ../lib/c, ./d.js (-> d.ts)
  - Alias specifiers: @app/x via tsconfig-style ``paths`` mappings
  - Python relative imports: .b, ..models, from . import x
  - Python absolute imports: pkg.mod, resolved under each python root
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import AliasConfig
from ..scanning.imports import ImportDecl
from ..scanning.languages import PYTHON, SCRIPT_EXTENSIONS, is_script

RESOLVED = "resolved"
UNRESOLVED = "unresolved"
EXTERNAL = "external"
AMBIGUOUS = "ambiguous"

# ESM sources import compiled names; ./b.js may mean ./b.ts
_SOURCE_SWAPS: dict[str, tuple[str, ...]] = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one import declaration."""

    status: str
    targets: tuple[str, ...] = ()
    candidates: tuple[str, ...] = ()


class AliasResolver:
    """Resolves import specifiers to canonical snapshot paths.

    Usage:
        resolver = AliasResolver(snapshot.paths, config.aliases)
        resolution = resolver.resolve("src/a.ts", "typescript", decl)
    """

    def __init__(self, paths: Iterable[str], config: AliasConfig) -> None:
        self._paths = frozenset(paths)
        self._config = config

    def resolve(self, source: str, language: str, decl: ImportDecl) -> Resolution:
        if is_script(language):
            return self._resolve_script(source, decl.specifier)
        if language == PYTHON:
            return self._resolve_python(source, decl)
        return Resolution(EXTERNAL)

    # ── Scripts ───────────────────────────────────────────────────

    def _resolve_script(self, source: str, spec: str) -> Resolution:
        if spec in (".", "..") or spec.startswith(("./", "../")):
            base = _join(_dirname(source), spec)
            if base is None:
                return Resolution(UNRESOLVED)
            return _decide(self._script_candidates(base), missing=UNRESOLVED)

        candidates = self._alias_candidates(spec)
        if candidates is None:
            return Resolution(EXTERNAL)
        # A matching alias with no file behind it is as ambiguous as two files.
        return _decide(candidates, missing=AMBIGUOUS)

    def _alias_candidates(self, spec: str) -> Optional[set[str]]:
        """Candidates from every mapping whose pattern matches, or None."""
        matched = False
        candidates: set[str] = set()
        for mapping in self._config.mappings:
            for pattern, targets in mapping.paths:
                star = _match_pattern(pattern, spec)
                if star is None:
                    continue
                matched = True
                for target in targets:
                    base = _join(mapping.base_url, target.replace("*", star))
                    if base is not None:
                        candidates |= self._script_candidates(base)
        return candidates if matched else None

    def _script_candidates(self, base: str) -> set[str]:
        names = [base]
        names.extend(base + ext for ext in SCRIPT_EXTENSIONS)
        prefix = f"{base}/" if base else ""
        names.extend(f"{prefix}index{ext}" for ext in SCRIPT_EXTENSIONS)
        dot = base.rfind(".")
        if dot > base.rfind("/"):
            for swap in _SOURCE_SWAPS.get(base[dot:], ()):
                names.append(base[:dot] + swap)
        return {n for n in names if n in self._paths}

    # ── Python ────────────────────────────────────────────────────

    def _resolve_python(self, source: str, decl: ImportDecl) -> Resolution:
        spec = decl.specifier
        if spec.startswith("."):
            dots = len(spec) - len(spec.lstrip("."))
            package = _dirname(source)
            for _ in range(dots - 1):
                if not package:
                    return Resolution(UNRESOLVED)
                package = _dirname(package)
            module = spec[dots:].replace(".", "/")
            base = _join(package, module) if module else package
            return self._python_targets([base], decl.names, missing=UNRESOLVED)

        module = spec.replace(".", "/")
        bases = [_join(root, module) for root in self._config.python_roots]
        return self._python_targets([b for b in bases if b is not None], decl.names, missing=EXTERNAL)

    def _python_targets(self, bases: list[str], names: tuple[str, ...], missing: str) -> Resolution:
        submodules: list[str] = []
        for name in names:
            found = set()
            for base in bases:
                found |= self._python_module_files(_join(base, name) if base else name)
            if len(found) > 1:
                return Resolution(AMBIGUOUS, candidates=tuple(sorted(found)))
            submodules.extend(found)
        if submodules:
            return Resolution(RESOLVED, targets=tuple(sorted(set(submodules))))

        module_files: set[str] = set()
        for base in bases:
            module_files |= self._python_module_files(base)
        return _decide(module_files, missing=missing)

    def _python_module_files(self, base: Optional[str]) -> set[str]:
        if base is None:
            return set()
        names = (f"{base}/__init__.py", f"{base}.py") if base else ("__init__.py",)
        return {n for n in names if n in self._paths}


# ── Path helpers ─────────────────────────────────────────────────────


def _decide(candidates: set[str], missing: str) -> Resolution:
    ordered = tuple(sorted(candidates))
    if len(ordered) == 1:
        return Resolution(RESOLVED, targets=ordered, candidates=ordered)
    if not ordered:
        return Resolution(missing)
    return Resolution(AMBIGUOUS, candidates=ordered)


def _match_pattern(pattern: str, spec: str) -> Optional[str]:
    """Return the text captured by ``*`` (or "" for exact patterns)."""
    if "*" not in pattern:
        return "" if pattern == spec else None
    prefix, suffix = pattern.split("*", 1)
    if len(spec) < len(prefix) + len(suffix):
        return None
    if spec.startswith(prefix) and spec.endswith(suffix):
        return spec[len(prefix):len(spec) - len(suffix)]
    return None


def _dirname(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def _join(base: str, relative: str) -> Optional[str]:
    """Join and collapse ``.``/``..``; None when the result leaves the root."""
    parts: list[str] = []
    for part in f"{base}/{relative}".split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not parts:
                return None
            parts.pop()
            continue
        parts.append(part)
    return "/".join(parts)
