"""Tests for confidence/ - score formula, gate order, monorepo detection."""

import pytest

from arcsight.config import ConfidenceConfig, MonorepoConfig
from arcsight.confidence import ConfidenceReport, confidence_gate, detect_monorepo, evaluate_confidence
from arcsight.exceptions import ErrorCode
from arcsight.graph.models import AliasStats, SegmentationStats


def _never(snapshot):
    return False


def _always(snapshot):
    return True


def _report(score=1.0, source_files=10, is_monorepo=False):
    return ConfidenceReport(
        score=score,
        segmentation_ratio=1.0,
        alias_ratio=1.0,
        source_files=source_files,
        is_monorepo=is_monorepo,
    )


CLEAN = AliasStats(attempted=4, resolved=4)


# ── Score ─────────────────────────────────────────────────────────


class TestEvaluateConfidence:
    def test_perfect_repository_scores_one(self, make_snapshot):
        snapshot = make_snapshot({f"src/f{i}.ts": "" for i in range(10)})
        report = evaluate_confidence(snapshot, CLEAN, ConfidenceConfig(), is_monorepo=_never)
        assert report.score == 1.0
        assert report.source_files == 10

    def test_formula(self, make_snapshot):
        snapshot = make_snapshot({})
        report = evaluate_confidence(
            snapshot,
            AliasStats(attempted=4, resolved=2, unresolved=2),
            ConfidenceConfig(),
            segmentation=SegmentationStats(source_files=5, segmented=4),
            is_monorepo=_never,
        )
        # 0.5 * 0.8 + 0.4 * 0.5 + 0.1 * 0.5
        assert report.score == pytest.approx(0.65)
        assert report.segmentation_ratio == 0.8
        assert report.alias_ratio == 0.5

    def test_no_source_files_scores_zero(self, make_snapshot):
        report = evaluate_confidence(
            make_snapshot({"README.md": "hi"}), AliasStats(), ConfidenceConfig(), is_monorepo=_never
        )
        assert report.score == 0.0
        assert report.source_files == 0

    def test_segmentation_recomputed_when_not_given(self, make_snapshot):
        snapshot = make_snapshot({"src/a.ts": "", "src/b.ts": "export const = ;\n"})
        report = evaluate_confidence(snapshot, AliasStats(), ConfidenceConfig(), is_monorepo=_never)
        assert report.segmentation_ratio == 0.5

    def test_isolated_from_graph_content(self, make_snapshot):
        """Same segmentation and alias stats, different imports: same score."""
        acyclic = make_snapshot({f"src/f{i}.ts": "" for i in range(10)})
        cyclic = make_snapshot({
            **{f"src/f{i}.ts": "" for i in range(8)},
            "src/a.ts": "import './b';\n",
            "src/b.ts": "import './a';\n",
        })
        stats = AliasStats(attempted=2, resolved=2)
        one = evaluate_confidence(acyclic, stats, ConfidenceConfig(), is_monorepo=_never)
        two = evaluate_confidence(cyclic, stats, ConfidenceConfig(), is_monorepo=_never)
        assert one == two

    def test_custom_weights(self, make_snapshot):
        config = ConfidenceConfig(weight_segmentation=0.0, weight_alias=1.0, weight_size=0.0)
        report = evaluate_confidence(
            make_snapshot({}),
            AliasStats(attempted=10, resolved=9, unresolved=1),
            config,
            segmentation=SegmentationStats(source_files=1, segmented=0),
            is_monorepo=_never,
        )
        assert report.score == pytest.approx(0.9)


# ── Gate ──────────────────────────────────────────────────────────


class TestConfidenceGate:
    def test_open(self):
        assert confidence_gate(_report(), CLEAN, ConfidenceConfig()) is None

    def test_ambiguity_first(self):
        stats = AliasStats(attempted=1, ambiguous=1)
        report = _report(score=0.1, source_files=1, is_monorepo=True)
        assert confidence_gate(report, stats, ConfidenceConfig()) == ErrorCode.ALIAS_AMBIGUOUS

    def test_monorepo_before_size(self):
        report = _report(source_files=1, is_monorepo=True)
        assert confidence_gate(report, CLEAN, ConfidenceConfig()) == ErrorCode.MONOREPO

    def test_insufficient_files(self):
        report = _report(score=0.1, source_files=9)
        assert confidence_gate(report, CLEAN, ConfidenceConfig()) == ErrorCode.INSUFFICIENT_FILES

    def test_low_confidence(self):
        assert confidence_gate(_report(score=0.79), CLEAN, ConfidenceConfig()) == ErrorCode.LOW_CONFIDENCE

    def test_threshold_is_inclusive(self):
        assert confidence_gate(_report(score=0.8), CLEAN, ConfidenceConfig()) is None


# ── Monorepo ──────────────────────────────────────────────────────


class TestDetectMonorepo:
    def test_plain_repository(self, make_snapshot):
        snapshot = make_snapshot({"package.json": '{"name": "web"}', "src/a.ts": ""})
        assert not detect_monorepo(snapshot)

    def test_workspace_marker(self, make_snapshot):
        assert detect_monorepo(make_snapshot({"pnpm-workspace.yaml": "packages: []", "a.ts": ""}))

    def test_package_json_workspaces(self, make_snapshot):
        snapshot = make_snapshot({"package.json": '{"workspaces": ["packages/*"]}'})
        assert detect_monorepo(snapshot)

    def test_two_nested_manifests(self, make_snapshot):
        snapshot = make_snapshot({
            "packages/web/package.json": "{}",
            "services/api/pyproject.toml": "",
        })
        assert detect_monorepo(snapshot)

    def test_one_nested_manifest(self, make_snapshot):
        snapshot = make_snapshot({"package.json": "{}", "docs/package.json": "{}"})
        assert not detect_monorepo(snapshot)

    def test_vendored_manifests_ignored(self, make_snapshot):
        snapshot = make_snapshot({
            "node_modules/left-pad/package.json": "{}",
            "vendor/lib/go.mod": "",
            "src/package.json": "{}",
        })
        assert not detect_monorepo(snapshot)

    def test_markers_configurable(self, make_snapshot):
        snapshot = make_snapshot({"workspace.toml": ""})
        assert not detect_monorepo(snapshot)
        assert detect_monorepo(snapshot, MonorepoConfig(markers=("workspace.toml",)))

    def test_invalid_root_package_json(self, make_snapshot):
        assert not detect_monorepo(make_snapshot({"package.json": "{not json"}))

    def test_predicate_is_pluggable(self, make_snapshot):
        snapshot = make_snapshot({"src/a.ts": ""})
        report = evaluate_confidence(snapshot, CLEAN, ConfidenceConfig(), is_monorepo=_always)
        assert report.is_monorepo
