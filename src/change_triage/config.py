"""Review tier configuration.

Thresholds and critical path globs that drive tier classification. The
configuration is an explicit read-only value: load it once with
``load_tier_config`` or build it with ``default_tier_config``.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import structlog
import yaml

from .exceptions import ConfigError
from .models import FileType

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = ".triage/review-tier-config.yaml"
DEFAULT_PROFILES_DIR = ".triage/review-profiles"


@dataclass(frozen=True)
class QuickThresholds:
    """Upper bounds for the quick tier."""

    max_files: int = 3
    max_lines: int = 50
    allowed_types: frozenset[FileType] = frozenset({FileType.TEST, FileType.CONFIG})


@dataclass(frozen=True)
class StandardThresholds:
    """Upper bounds for the standard tier."""

    max_files: int = 10
    max_lines: int = 200


@dataclass(frozen=True)
class FullThresholds:
    """Lower bounds that force the full tier."""

    min_files: int = 11
    min_lines: int = 201


@dataclass(frozen=True)
class TierThresholds:
    quick: QuickThresholds = field(default_factory=QuickThresholds)
    standard: StandardThresholds = field(default_factory=StandardThresholds)
    full: FullThresholds = field(default_factory=FullThresholds)


@dataclass(frozen=True)
class ReviewTierConfig:
    """Complete tier classification configuration."""

    version: str = "1.0"
    critical_paths: tuple[str, ...] = (
        "src/lib/core/**",
        "src/commands/**",
        ".triage/standards.md",
        ".triage/principles.md",
    )
    tier_thresholds: TierThresholds = field(default_factory=TierThresholds)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReviewTierConfig":
        """
        Build a configuration from the YAML document shape.

        Keys that are absent keep their default values.

        Raises:
            ConfigError: If a value has the wrong type or names an unknown file type
        """
        if not isinstance(data, dict):
            raise ConfigError("Tier config must be a mapping")

        base = cls()
        version = data.get("version", base.version)

        critical_paths = base.critical_paths
        if "critical_paths" in data:
            critical_paths = tuple(_string_list(data["critical_paths"], "critical_paths"))

        raw_thresholds = data.get("tier_thresholds")
        if raw_thresholds is None:
            raw_thresholds = {}
        if not isinstance(raw_thresholds, dict):
            raise ConfigError("tier_thresholds must be a mapping")

        quick_data = _section(raw_thresholds, "quick")
        standard_data = _section(raw_thresholds, "standard")
        full_data = _section(raw_thresholds, "full")

        defaults = base.tier_thresholds
        quick = replace(
            defaults.quick,
            max_files=_int(quick_data, "max_files", defaults.quick.max_files, "quick"),
            max_lines=_int(quick_data, "max_lines", defaults.quick.max_lines, "quick"),
        )
        if "allowed_types" in quick_data:
            quick = replace(quick, allowed_types=_file_types(quick_data["allowed_types"]))

        standard = StandardThresholds(
            max_files=_int(standard_data, "max_files", defaults.standard.max_files, "standard"),
            max_lines=_int(standard_data, "max_lines", defaults.standard.max_lines, "standard"),
        )
        full = FullThresholds(
            min_files=_int(full_data, "min_files", defaults.full.min_files, "full"),
            min_lines=_int(full_data, "min_lines", defaults.full.min_lines, "full"),
        )

        return cls(
            version=str(version),
            critical_paths=critical_paths,
            tier_thresholds=TierThresholds(quick=quick, standard=standard, full=full),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the YAML document shape."""
        thresholds = self.tier_thresholds
        return {
            "version": self.version,
            "critical_paths": list(self.critical_paths),
            "tier_thresholds": {
                "quick": {
                    "max_files": thresholds.quick.max_files,
                    "max_lines": thresholds.quick.max_lines,
                    "allowed_types": sorted(t.value for t in thresholds.quick.allowed_types),
                },
                "standard": {
                    "max_files": thresholds.standard.max_files,
                    "max_lines": thresholds.standard.max_lines,
                },
                "full": {
                    "min_files": thresholds.full.min_files,
                    "min_lines": thresholds.full.min_lines,
                },
            },
        }


def default_tier_config() -> ReviewTierConfig:
    """Configuration used when no config file is available."""
    return ReviewTierConfig()


def load_tier_config(path: str | Path) -> ReviewTierConfig:
    """
    Load tier configuration from a YAML file.

    Never raises: a missing or invalid file falls back to the defaults.
    """
    config_path = Path(path)

    if not config_path.exists():
        logger.warning("Config file not found, using defaults", path=str(config_path))
        return default_tier_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            raise ConfigError("Tier config file is empty")
        config = ReviewTierConfig.from_dict(data)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ConfigError) as e:
        logger.warning(
            "Failed to load config, using defaults", path=str(config_path), error=str(e)
        )
        return default_tier_config()

    logger.debug("Loaded config", path=str(config_path), version=config.version)
    return config


def _section(thresholds: dict[str, Any], name: str) -> dict[str, Any]:
    section = thresholds.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"tier_thresholds.{name} must be a mapping")
    return section


def _int(section: dict[str, Any], key: str, default: int, where: str) -> int:
    value = section.get(key, default)
    # bool is an int subclass but never a valid threshold
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"tier_thresholds.{where}.{key} must be an integer, got {value!r}")
    return value


def _string_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return value


def _file_types(value: Any) -> frozenset[FileType]:
    names = _string_list(value, "tier_thresholds.quick.allowed_types")
    try:
        return frozenset(FileType(name) for name in names)
    except ValueError as e:
        raise ConfigError(f"Unknown file type in allowed_types: {e}") from e
