"""Tests for config.py - defaults, validation, TOML loading and upgrades."""

from pathlib import Path

import pytest

from arcsight.config import (
    DEFAULT_CONFIG,
    AliasMapping,
    AnalyzerConfig,
    ConfidenceConfig,
    Limits,
    config_from_dict,
    load_config,
)
from arcsight.exceptions import ConfigurationError, InvalidConfigError


class TestDefaults:
    def test_values(self):
        assert DEFAULT_CONFIG.limits.max_cycle_length == 5
        assert DEFAULT_CONFIG.limits.timeout_seconds == 7.0
        assert DEFAULT_CONFIG.confidence.threshold == 0.8
        assert DEFAULT_CONFIG.confidence.min_source_files == 10
        assert DEFAULT_CONFIG.aliases.python_roots == ("", "src")

    def test_frozen(self):
        with pytest.raises(Exception):
            DEFAULT_CONFIG.sandbox_policy_version = "sp-2"

    def test_snapshot_round_trips_through_config_from_dict(self):
        config = AnalyzerConfig(
            confidence=ConfidenceConfig(threshold=0.9),
            limits=Limits(max_files=100),
        )
        assert config_from_dict(config.snapshot()) == config


class TestValidation:
    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum to 1.0"):
            ConfidenceConfig(weight_segmentation=0.5, weight_alias=0.5, weight_size=0.5)

    def test_cycle_bounds(self):
        with pytest.raises(ValueError):
            Limits(min_cycle_length=1)
        with pytest.raises(ValueError):
            Limits(min_cycle_length=4, max_cycle_length=3)

    def test_alias_pattern_single_star(self):
        with pytest.raises(ValueError):
            AliasMapping(paths=(("@a/*/*", ("src/*",)),))

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            config_from_dict({"limits": {"max_depth": 3}})
        assert exc_info.value.key == "limits.max_depth"

    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidConfigError):
            config_from_dict({"confidence": {"threshold": "high"}})

    def test_bool_is_not_a_number(self):
        with pytest.raises(InvalidConfigError):
            config_from_dict({"confidence": {"min_source_files": True}})

    def test_invalid_value_wrapped(self):
        with pytest.raises(InvalidConfigError):
            config_from_dict({"limits": {"max_files": 0}})


class TestLoadConfig:
    def test_missing_project_config_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() is DEFAULT_CONFIG

    def test_project_config_picked_up(self, tmp_path, monkeypatch):
        (tmp_path / "arcsight.toml").write_text(
            "schema_version = 3\n[limits]\nmax_files = 123\n", encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)
        assert load_config().limits.max_files == 123

    def test_explicit_file_with_aliases(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            "schema_version = 3\n"
            "[[aliases.mappings]]\n"
            "base_url = \"web\"\n"
            "[aliases.mappings.paths]\n"
            "\"@app/*\" = [\"src/*\"]\n"
            "\"@lib\" = \"lib/index.ts\"\n",
            encoding="utf-8",
        )
        config = load_config(path)
        (mapping,) = config.aliases.mappings
        assert mapping.base_url == "web"
        assert mapping.paths == (("@app/*", ("src/*",)), ("@lib", ("lib/index.ts",)))

    def test_old_schema_upgraded(self, tmp_path):
        path = tmp_path / "old.toml"
        path.write_text("[confidence]\nthreshold = 0.9\n", encoding="utf-8")
        config = load_config(path)
        assert config.confidence.threshold == 0.9
        assert config.confidence.weight_alias == 0.4
        assert config.schema_version == 3

    def test_future_schema_rejected(self, tmp_path):
        path = tmp_path / "future.toml"
        path.write_text("schema_version = 9\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[limits\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_path_type(self, tmp_path):
        path = tmp_path / "ok.toml"
        path.write_text("schema_version = 3\n", encoding="utf-8")
        assert isinstance(load_config(Path(path)), AnalyzerConfig)
