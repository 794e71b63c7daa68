"""
Timeline error hierarchy.

Engine computations do not raise for data problems: empty task sets yield
no extent, inverted intervals are clamped, tick runs are capped. These
exceptions cover the boundaries around the engine (config files, record
parsing, record stores).
"""


class TimelineError(Exception):
    """Base class for all timeline errors."""

    pass


class ConfigError(TimelineError):
    """Raised when the settings file exists but cannot be used."""

    pass


class InvalidTaskRecord(TimelineError):
    """Raised when a record lacks a field the engine cannot default (id, created_at)."""

    pass


class TaskSourceError(TimelineError):
    """Raised when a task source cannot be read."""

    pass
