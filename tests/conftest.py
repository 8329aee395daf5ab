"""Shared test fixtures for ArcSight tests."""

import pytest

from arcsight.attribution import PRDiff
from arcsight.engine import AnalysisRequest
from arcsight.snapshot import RawFile, canonicalize

# Eight import-free TypeScript files; with a two-file cycle this makes the
# ten source files the confidence gate requires.
FILLER = {f"src/util{i}.ts": f"export const value{i} = {i};\n" for i in range(8)}

TWO_CYCLE_BASE = {
    "src/a.ts": "import { b } from './b';\nexport const a = 1;\n",
    "src/b.ts": "export const b = 2;\n",
}

TWO_CYCLE_HEAD = {
    "src/a.ts": "import { b } from './b';\nexport const a = 1;\n",
    "src/b.ts": "import { a } from './a';\nexport const b = 2;\n",
}


def raw_files(mapping):
    """Build sorted RawFile tuples from a {path: text} mapping."""
    return tuple(RawFile(path, text.encode("utf-8")) for path, text in sorted(mapping.items()))


@pytest.fixture
def make_snapshot():
    """Factory: {path: text} -> canonical RepoSnapshot."""

    def _make(mapping):
        return canonicalize(raw_files(mapping))

    return _make


@pytest.fixture
def make_request():
    """Factory for AnalysisRequest with filler files added to head and base."""

    def _make(
        head,
        base=None,
        changed=(),
        added=(),
        renamed=(),
        identity=None,
        filler=True,
    ):
        extra = FILLER if filler else {}
        return AnalysisRequest(
            head=raw_files({**extra, **head}),
            base=raw_files({**extra, **base}) if base is not None else None,
            diff=PRDiff.create(changed_files=changed, added_import_lines=added, renamed_files=renamed),
            identity=identity if identity is not None else {"repo": "acme/web", "pr": 7},
        )

    return _make


@pytest.fixture
def two_cycle_request(make_request):
    """src/b.ts gains an import of src/a.ts, closing a -> b -> a."""
    return make_request(
        TWO_CYCLE_HEAD,
        base=TWO_CYCLE_BASE,
        changed=["src/b.ts"],
        added=[("src/b.ts", 1)],
    )


@pytest.fixture
def frozen_clock():
    """A clock that never advances."""
    return lambda: 0.0
