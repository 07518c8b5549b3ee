"""Configuration loading and management for codedrift.

Configuration sources are merged in priority order:
    1. Defaults (defined in DriftConfig)
    2. Project config (./drift.toml or ./.drift.toml)
    3. Explicit config file
    4. Environment variables (DRIFT_* prefix)
    5. Overrides passed as kwargs (typically CLI flags)

Example:
    >>> config = load_config(root="/src/project", language="go")
    >>> config.thresholds.max_complexity
    15

A project config looks like::

    language = "typescript"
    exclude = ["node_modules", "dist"]
    boundaries = ["src/ui -> src/db", { deny = "pkg/api -> internal/db" }]

    [weights]
    complexity = 0.4

    [thresholds]
    max_complexity = 12
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

CONFIG_FILENAMES = ("drift.toml", ".drift.toml")

DEFAULT_EXCLUDE = (
    "vendor",
    "node_modules",
    ".git",
    "testdata",
    "__pycache__",
    ".venv",
    "target",
    "dist",
    "build",
)


@dataclass(frozen=True)
class WeightConfig:
    """Per-metric weights of the total score.

    They are expected to sum to 1.0. That is not enforced here, so a
    caller can deliberately tilt or zero a metric.
    """

    complexity: float = 0.30
    deps: float = 0.20
    boundaries: float = 0.20
    dead_code: float = 0.15
    coverage: float = 0.15

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise InvalidConfigError(f"weights.{f.name}", value, "must be non-negative")


@dataclass(frozen=True)
class ThresholdConfig:
    """Scoring and classification thresholds.

    Attributes:
        max_complexity: Functions above this lose complexity score
        max_stale_days: Dependencies published longer ago than this are outdated
        min_score: Score below which `codedrift check` fails
        default_stale_days: Staleness assumed when a registry has no publish time
    """

    max_complexity: int = 15
    max_stale_days: int = 90
    min_score: float = 70.0
    default_stale_days: int = 30

    def __post_init__(self) -> None:
        if self.max_complexity < 1:
            raise InvalidConfigError("thresholds.max_complexity", self.max_complexity, "must be at least 1")
        if self.max_stale_days < 1:
            raise InvalidConfigError("thresholds.max_stale_days", self.max_stale_days, "must be at least 1")
        if not 0.0 <= self.min_score <= 100.0:
            raise InvalidConfigError("thresholds.min_score", self.min_score, "must be between 0 and 100")
        if self.default_stale_days < 0:
            raise InvalidConfigError(
                "thresholds.default_stale_days", self.default_stale_days, "must be non-negative"
            )


@dataclass(frozen=True)
class DriftConfig:
    """Inputs consumed by the analysis engine.

    Attributes:
        root: Project root to analyze
        language: Explicit language tag; None means detect from manifests
        exclude: Directory basenames pruned at any depth
        boundaries: Deny rules of the form "from -> to"
        weights: Score weights
        thresholds: Scoring thresholds
        registry_timeout_seconds: Per-lookup HTTP timeout
        registry_workers: Concurrent registry lookups
        verbosity: Logging verbosity level
    """

    root: str = field(default_factory=lambda: str(Path.cwd()))
    language: Optional[str] = None
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    boundaries: list[str] = field(default_factory=list)
    weights: WeightConfig = field(default_factory=WeightConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    registry_timeout_seconds: float = 5.0
    registry_workers: int = 8
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.registry_timeout_seconds <= 0:
            raise InvalidConfigError(
                "registry_timeout_seconds", self.registry_timeout_seconds, "must be positive"
            )
        if self.registry_workers < 1:
            raise InvalidConfigError("registry_workers", self.registry_workers, "must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "must be quiet, normal or verbose")

    @property
    def root_path(self) -> Path:
        return Path(self.root).resolve()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> DriftConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). None values
            are ignored so unset CLI options do not mask file settings.

    Returns:
        Validated DriftConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
    """
    merged: dict[str, Any] = {}

    for name in CONFIG_FILENAMES:
        project_config = Path.cwd() / name
        if project_config.exists():
            merged.update(_read_config_file(project_config))
            break

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_config_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides.pop("verbose"):
            overrides["verbosity"] = "verbose"
    if "quiet" in overrides:
        if overrides.pop("quiet"):
            overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    weights = merged.pop("weights", None)
    if isinstance(weights, dict):
        merged["weights"] = _nested(WeightConfig, weights, "weights")
    elif isinstance(weights, WeightConfig):
        merged["weights"] = weights

    thresholds = merged.pop("thresholds", None)
    if isinstance(thresholds, dict):
        merged["thresholds"] = _nested(ThresholdConfig, thresholds, "thresholds")
    elif isinstance(thresholds, ThresholdConfig):
        merged["thresholds"] = thresholds

    if "boundaries" in merged:
        merged["boundaries"] = _normalize_boundaries(merged["boundaries"])

    if "root" in merged:
        merged["root"] = str(Path(merged["root"]).expanduser().resolve())

    try:
        return DriftConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _nested(cls: type, values: dict, section: str) -> Any:
    try:
        return cls(**values)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [{section}] config: {e}")


def _normalize_boundaries(raw: Any) -> list[str]:
    """Accept ``"a -> b"`` strings or ``{deny = "a -> b"}`` tables."""
    if not isinstance(raw, list):
        raise InvalidConfigError("boundaries", raw, "must be a list")
    rules = []
    for item in raw:
        if isinstance(item, str):
            rules.append(item)
        elif isinstance(item, dict) and isinstance(item.get("deny"), str):
            rules.append(item["deny"])
        else:
            raise InvalidConfigError("boundaries", item, 'expected "from -> to" or {deny = "from -> to"}')
    return rules


def _load_env_vars() -> dict[str, Any]:
    """Load scalar configuration from DRIFT_* environment variables.

    Supported: DRIFT_ROOT, DRIFT_LANGUAGE, DRIFT_REGISTRY_TIMEOUT_SECONDS,
    DRIFT_REGISTRY_WORKERS, DRIFT_VERBOSITY. List and nested fields are
    file-only.
    """
    type_hints = get_type_hints(DriftConfig)
    result: dict[str, Any] = {}

    for field_name in DriftConfig.__dataclass_fields__:
        env_key = f"DRIFT_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints.get(field_name))
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment string to the field's scalar type, or None to skip it."""
    origin = getattr(type_hint, "__origin__", None)
    args = getattr(type_hint, "__args__", ())

    # Optional[X] is Union[X, None]
    if type(None) in args:
        non_none = [t for t in args if t is not type(None)]
        if non_none:
            type_hint = non_none[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is int:
        return int(value)
    if type_hint is float:
        return float(value)
    if type_hint is str or origin is Literal:
        return value
    return None


def _read_config_file(path: Path) -> dict:
    try:
        return load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")


def load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or the 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
