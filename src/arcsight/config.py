"""Configuration loading and management for ArcSight.

The analyzer configuration is static and versioned: the same file must drive
live and shadow invocations, so there is no environment-variable or
per-request merging. Sources, in order:
    1. Defaults (defined in AnalyzerConfig)
    2. Project config (./arcsight.toml), when no explicit file is given
    3. Explicit config file

Older config files are upgraded through the schema adapter before they are
validated.

Example:
    >>> config = load_config()
    >>> config.limits.max_cycle_length
    5
    >>> config.confidence.threshold
    0.8
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError, InvalidConfigError, SchemaUpgradeFailure
from .schema import adapt

CONFIG_SCHEMA_VERSION = 3
PROJECT_CONFIG_NAME = "arcsight.toml"

DEFAULT_MONOREPO_MARKERS = (
    "lerna.json",
    "nx.json",
    "pnpm-workspace.yaml",
    "rush.json",
    "turbo.json",
)
DEFAULT_MANIFESTS = (
    "Cargo.toml",
    "go.mod",
    "package.json",
    "pyproject.toml",
    "setup.py",
)


@dataclass(frozen=True)
class AliasMapping:
    """One tsconfig-style path mapping.

    Attributes:
        base_url: Directory the targets are relative to ("" = repo root)
        paths: (pattern, targets) pairs; a pattern holds at most one ``*``
    """

    base_url: str = ""
    paths: tuple[tuple[str, tuple[str, ...]], ...] = ()

    def __post_init__(self) -> None:
        for pattern, targets in self.paths:
            if pattern.count("*") > 1:
                raise ValueError(f"alias pattern {pattern!r} has more than one '*'")
            if not targets:
                raise ValueError(f"alias pattern {pattern!r} has no targets")
            for target in targets:
                if target.count("*") > 1:
                    raise ValueError(f"alias target {target!r} has more than one '*'")


@dataclass(frozen=True)
class AliasConfig:
    """Static alias map used for import resolution."""

    mappings: tuple[AliasMapping, ...] = ()
    # Directories Python absolute imports are resolved from
    python_roots: tuple[str, ...] = ("", "src")


@dataclass(frozen=True)
class Limits:
    """Hard limits. Copied verbatim into ``core.limits``."""

    min_cycle_length: int = 2
    max_cycle_length: int = 5
    max_files: int = 50000
    max_edges: int = 500000
    timeout_seconds: float = 7.0

    def __post_init__(self) -> None:
        if self.min_cycle_length < 2:
            raise ValueError("min_cycle_length must be at least 2")
        if self.max_cycle_length < self.min_cycle_length:
            raise ValueError("max_cycle_length must be >= min_cycle_length")
        if self.max_files < 1:
            raise ValueError("max_files must be at least 1")
        if self.max_edges < 1:
            raise ValueError("max_edges must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


@dataclass(frozen=True)
class ConfidenceConfig:
    """Confidence gate and formula weights.

    score = w_seg * segmentation_ratio + w_alias * alias_ratio + w_size * size_factor
    where size_factor = min(1, source_files / min_source_files).
    """

    threshold: float = 0.8
    min_source_files: int = 10
    weight_segmentation: float = 0.5
    weight_alias: float = 0.4
    weight_size: float = 0.1

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError("threshold must be between 0.0 and 1.0")
        if self.min_source_files < 1:
            raise ValueError("min_source_files must be at least 1")
        for name in ("weight_segmentation", "weight_alias", "weight_size"):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be non-negative")
        weight_sum = self.weight_segmentation + self.weight_alias + self.weight_size
        if not 0.999 <= weight_sum <= 1.001:
            raise ValueError(f"Confidence weights must sum to 1.0, got {weight_sum:.3f}")


@dataclass(frozen=True)
class MonorepoConfig:
    """Inputs of the default monorepo predicate."""

    markers: tuple[str, ...] = DEFAULT_MONOREPO_MARKERS
    manifests: tuple[str, ...] = DEFAULT_MANIFESTS


@dataclass(frozen=True)
class AnalyzerConfig:
    """Complete analyzer configuration.

    Attributes:
        schema_version: Config schema version this object conforms to
        aliases: Static alias map
        limits: Cycle length bounds, size limits and the timeout
        confidence: Confidence gate and weights
        monorepo: Default monorepo predicate inputs
        sandbox_policy_version: Copied into ``meta.sandbox_policy_version``
        rulepack_version: Copied into ``version.rulepack``
    """

    schema_version: int = CONFIG_SCHEMA_VERSION
    aliases: AliasConfig = field(default_factory=AliasConfig)
    limits: Limits = field(default_factory=Limits)
    confidence: ConfidenceConfig = field(default_factory=ConfidenceConfig)
    monorepo: MonorepoConfig = field(default_factory=MonorepoConfig)
    sandbox_policy_version: str = "sp-1"
    rulepack_version: str = "base-1"

    def __post_init__(self) -> None:
        if self.schema_version != CONFIG_SCHEMA_VERSION:
            raise ValueError(
                f"schema_version must be {CONFIG_SCHEMA_VERSION}, got {self.schema_version}"
            )

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the config, in the on-disk table layout."""
        return {
            "schema_version": self.schema_version,
            "aliases": {
                "mappings": [
                    {
                        "base_url": m.base_url,
                        "paths": {pattern: list(targets) for pattern, targets in m.paths},
                    }
                    for m in self.aliases.mappings
                ],
                "python_roots": list(self.aliases.python_roots),
            },
            "limits": self.limits_snapshot(),
            "confidence": {
                "threshold": self.confidence.threshold,
                "min_source_files": self.confidence.min_source_files,
                "weights": {
                    "segmentation": self.confidence.weight_segmentation,
                    "alias": self.confidence.weight_alias,
                    "size": self.confidence.weight_size,
                },
            },
            "monorepo": {
                "markers": list(self.monorepo.markers),
                "manifests": list(self.monorepo.manifests),
            },
            "sandbox_policy_version": self.sandbox_policy_version,
            "rulepack_version": self.rulepack_version,
        }

    def limits_snapshot(self) -> dict[str, Any]:
        """The ``core.limits`` block of every envelope."""
        return {
            "min_cycle_length": self.limits.min_cycle_length,
            "max_cycle_length": self.limits.max_cycle_length,
            "max_files": self.limits.max_files,
            "max_edges": self.limits.max_edges,
            "timeout_seconds": self.limits.timeout_seconds,
        }


DEFAULT_CONFIG = AnalyzerConfig()


def config_from_dict(raw: Mapping[str, Any]) -> AnalyzerConfig:
    """Build an AnalyzerConfig from a current-schema table.

    Raises:
        InvalidConfigError: On unknown keys or values of the wrong shape
    """
    raw = dict(raw)
    _reject_unknown("", raw, {
        "schema_version", "aliases", "limits", "confidence", "monorepo",
        "sandbox_policy_version", "rulepack_version",
    })

    kwargs: dict[str, Any] = {}
    if "schema_version" in raw:
        kwargs["schema_version"] = _expect(raw, "schema_version", int)
    if "aliases" in raw:
        kwargs["aliases"] = _aliases_from_dict(_expect(raw, "aliases", dict))
    if "limits" in raw:
        limits = _expect(raw, "limits", dict)
        _reject_unknown("limits.", limits, set(Limits.__dataclass_fields__))
        if "timeout_seconds" in limits:
            limits = dict(limits, timeout_seconds=float(_expect(limits, "timeout_seconds", (int, float))))
        kwargs["limits"] = _construct("limits", Limits, limits)
    if "confidence" in raw:
        kwargs["confidence"] = _confidence_from_dict(_expect(raw, "confidence", dict))
    if "monorepo" in raw:
        monorepo = _expect(raw, "monorepo", dict)
        _reject_unknown("monorepo.", monorepo, {"markers", "manifests"})
        kwargs["monorepo"] = _construct(
            "monorepo",
            MonorepoConfig,
            {key: tuple(_expect(monorepo, key, list)) for key in monorepo},
        )
    for key in ("sandbox_policy_version", "rulepack_version"):
        if key in raw:
            kwargs[key] = _expect(raw, key, str)

    return _construct("config", AnalyzerConfig, kwargs)


def load_config(config_file: Optional[Path] = None) -> AnalyzerConfig:
    """Load the analyzer configuration.

    Args:
        config_file: Optional explicit config file path. Without one,
            ``./arcsight.toml`` is used when present, else the defaults.

    Returns:
        Validated AnalyzerConfig instance

    Raises:
        ConfigurationError: If the config file is missing, unreadable,
            cannot be upgraded or holds invalid values
    """
    if config_file is None:
        project_config = Path.cwd() / PROJECT_CONFIG_NAME
        if not project_config.exists():
            return DEFAULT_CONFIG
        config_file = project_config
    elif not config_file.exists():
        raise ConfigurationError(f"Config file not found: {config_file}")

    try:
        raw = _load_toml_file(config_file)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    return config_from_toml_table(raw)


def config_from_toml_table(raw: Mapping[str, Any]) -> AnalyzerConfig:
    """Upgrade a raw config table to the current schema and validate it."""
    version = raw.get("schema_version", 1)
    if not isinstance(version, int):
        raise InvalidConfigError("schema_version", version, "must be an integer")
    try:
        upgraded = adapt(raw, "config", version, CONFIG_SCHEMA_VERSION)
    except SchemaUpgradeFailure as e:
        raise ConfigurationError(f"Cannot upgrade config: {e.message}")
    return config_from_dict(upgraded)


# ── Private helpers ──────────────────────────────────────────────────


def _aliases_from_dict(raw: dict[str, Any]) -> AliasConfig:
    _reject_unknown("aliases.", raw, {"mappings", "python_roots"})
    mappings = []
    for index, entry in enumerate(_expect(raw, "mappings", list) if "mappings" in raw else []):
        if not isinstance(entry, dict):
            raise InvalidConfigError(f"aliases.mappings[{index}]", entry, "must be a table")
        _reject_unknown(f"aliases.mappings[{index}].", entry, {"base_url", "paths"})
        paths = entry.get("paths", {})
        if not isinstance(paths, dict):
            raise InvalidConfigError(f"aliases.mappings[{index}].paths", paths, "must be a table")
        pairs = []
        # Pattern order is irrelevant to resolution; store sorted.
        for pattern in sorted(paths):
            targets = paths[pattern]
            if isinstance(targets, str):
                targets = [targets]
            if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
                raise InvalidConfigError(
                    f"aliases.mappings[{index}].paths.{pattern}", targets, "must be a list of strings"
                )
            pairs.append((pattern, tuple(targets)))
        mappings.append(
            _construct(
                f"aliases.mappings[{index}]",
                AliasMapping,
                {"base_url": str(entry.get("base_url", "")), "paths": tuple(pairs)},
            )
        )
    kwargs: dict[str, Any] = {"mappings": tuple(mappings)}
    if "python_roots" in raw:
        kwargs["python_roots"] = tuple(_expect(raw, "python_roots", list))
    return AliasConfig(**kwargs)


def _confidence_from_dict(raw: dict[str, Any]) -> ConfidenceConfig:
    _reject_unknown("confidence.", raw, {"threshold", "min_source_files", "weights"})
    kwargs: dict[str, Any] = {}
    if "threshold" in raw:
        kwargs["threshold"] = float(_expect(raw, "threshold", (int, float)))
    if "min_source_files" in raw:
        kwargs["min_source_files"] = _expect(raw, "min_source_files", int)
    if "weights" in raw:
        weights = _expect(raw, "weights", dict)
        _reject_unknown("confidence.weights.", weights, {"segmentation", "alias", "size"})
        for key in ("segmentation", "alias", "size"):
            if key in weights:
                kwargs[f"weight_{key}"] = float(_expect(weights, key, (int, float)))
    return _construct("confidence", ConfidenceConfig, kwargs)


def _construct(section: str, cls: type, kwargs: Mapping[str, Any]) -> Any:
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(section, dict(kwargs), str(e))


def _reject_unknown(prefix: str, raw: Mapping[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise InvalidConfigError(prefix + unknown[0], raw[unknown[0]], "unknown key")


def _expect(raw: Mapping[str, Any], key: str, kind: Any) -> Any:
    value = raw[key]
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and kind is not bool:
        raise InvalidConfigError(key, value, "wrong type")
    if not isinstance(value, kind):
        raise InvalidConfigError(key, value, "wrong type")
    return value


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli is not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
