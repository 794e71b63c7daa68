"""
Centralized engine settings.

Every tunable constant of the timeline engine lives in TimelineSettings.
Values load from timeline/data/timeline.yaml (override the path with
SITE_TIMELINE_CONFIG); a missing file falls back to the defaults below.

Usage:
    from timeline.config import get_settings

    settings = get_settings()
    settings.max_ticks  # 100
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from timeline import paths
from timeline.errors import ConfigError

logger = logging.getLogger(__name__)

GRANULARITY_NAMES = ("hourly", "daily", "weekly", "monthly", "yearly")

# YAML section -> keys it may carry
_SECTIONS = {
    "durations": ("urgent_default_hours", "standard_default_hours", "efficiency_epsilon_hours"),
    "extent": ("padding_ratio", "min_padding_days"),
    "axis": ("max_ticks", "default_granularity"),
    "efficiency": ("fast_threshold", "slow_threshold"),
    "navigation": ("pan_fraction", "min_viewport_hours"),
}


@dataclass(frozen=True)
class TimelineSettings:
    """Engine constants. Defaults match the shipped timeline/data/timeline.yaml."""

    urgent_default_hours: float = 8.0
    """Fallback length for urgent/high priority tasks with no due date or duration."""

    standard_default_hours: float = 24.0
    """Fallback length for medium/low priority tasks."""

    efficiency_epsilon_hours: float = 0.1
    """Floor applied to actual hours when dividing."""

    padding_ratio: float = 0.05
    min_padding_days: float = 1.0

    max_ticks: int = 100
    default_granularity: str = "daily"

    fast_threshold: float = 120.0
    slow_threshold: float = 80.0

    pan_fraction: float = 0.5
    min_viewport_hours: float = 1.0

    def __post_init__(self):
        for name in (
            "urgent_default_hours",
            "standard_default_hours",
            "efficiency_epsilon_hours",
            "min_padding_days",
            "pan_fraction",
            "min_viewport_hours",
        ):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.padding_ratio < 0:
            raise ConfigError(f"padding_ratio must not be negative, got {self.padding_ratio!r}")
        if self.max_ticks < 1:
            raise ConfigError(f"max_ticks must be at least 1, got {self.max_ticks!r}")
        if self.slow_threshold > self.fast_threshold:
            raise ConfigError("slow_threshold must not exceed fast_threshold")
        if self.default_granularity not in GRANULARITY_NAMES:
            raise ConfigError(
                f"default_granularity must be one of {', '.join(GRANULARITY_NAMES)}, "
                f"got {self.default_granularity!r}"
            )


def _coerce(name: str, value):
    """Convert a YAML scalar to the field's type."""
    if name == "default_granularity":
        return str(value).lower()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if name == "max_ticks":
        return int(value)
    return float(value)


def settings_from_dict(data: dict) -> TimelineSettings:
    """
    Build settings from the parsed YAML structure.

    Unknown sections and keys are logged and ignored.
    """
    if not isinstance(data, dict):
        raise ConfigError("timeline config must be a mapping")

    values = {}
    for section, body in data.items():
        if section not in _SECTIONS:
            logger.warning("Ignoring unknown config section: %s", section)
            continue
        if body is None:
            continue
        if not isinstance(body, dict):
            raise ConfigError(f"config section {section!r} must be a mapping")
        for key, value in body.items():
            if key not in _SECTIONS[section]:
                logger.warning("Ignoring unknown config key: %s.%s", section, key)
                continue
            values[key] = _coerce(key, value)

    return TimelineSettings(**values)


def load_settings(path: str | Path | None = None) -> TimelineSettings:
    """
    Load settings from YAML.

    Args:
        path: Settings file. Defaults to paths.config_path().

    Returns:
        TimelineSettings (defaults when the file does not exist)

    Raises:
        ConfigError if the file is unreadable, not valid YAML, or holds invalid values.
    """
    config_file = Path(path) if path else paths.config_path()
    if not config_file.exists():
        logger.warning("Timeline config not found at %s, using defaults", config_file)
        return TimelineSettings()

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load timeline config {config_file}: {e}") from e

    settings = settings_from_dict(data)
    logger.debug("Loaded timeline config from %s", config_file)
    return settings


_settings: TimelineSettings | None = None


def get_settings() -> TimelineSettings:
    """Process-wide settings, loaded once."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings_cache() -> None:
    """Forget the cached settings so the next get_settings() reloads."""
    global _settings
    _settings = None
