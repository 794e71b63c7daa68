"""
Duration Resolver - effective start/end and duration figures for one task.

Resolution chain:
- start: start_date, else created_at
- end (completed): completed_date, else updated_at
- end (otherwise): due_date, else start + planned/estimated hours,
  else start + priority default (urgent/high 8h, others 24h)
- planned hours: planned, else estimated, else start->due span, else priority default
- actual hours: actual, else (completed only) resolved end - start, else 0

An end before start is clamped to a zero-width interval and flagged;
one bad record never fails the whole timeline.
"""

import logging
import math
from datetime import timedelta

from timeline.config import TimelineSettings, get_settings
from timeline.models import (
    HOUR,
    MAX_INSTANT,
    MIN_INSTANT,
    ResolvedInterval,
    TaskPriority,
    TaskRecord,
    shift_instant,
)

logger = logging.getLogger(__name__)

_SHORT_PRIORITIES = (TaskPriority.URGENT, TaskPriority.HIGH)

# Longest duration that fits between the first and last representable instants
MAX_HOURS = (MAX_INSTANT - MIN_INSTANT) / HOUR


def default_hours(priority: TaskPriority, settings: TimelineSettings | None = None) -> float:
    """Fallback task length when nothing better is known."""
    settings = settings or get_settings()
    if priority in _SHORT_PRIORITIES:
        return settings.urgent_default_hours
    return settings.standard_default_hours


def _positive(value: float | None) -> float | None:
    if value is None or not math.isfinite(value) or value <= 0 or value > MAX_HOURS:
        return None
    return float(value)


def _hours_between(start, end) -> float:
    return (end - start) / HOUR


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def efficiency_percent(
    planned_hours: float, actual_hours: float, settings: TimelineSettings | None = None
) -> int:
    """planned / actual as a rounded percentage; 100 when there is no actual time yet."""
    settings = settings or get_settings()
    if actual_hours <= 0:
        return 100
    return round_half_up(planned_hours / max(actual_hours, settings.efficiency_epsilon_hours) * 100)


def resolve_interval(task: TaskRecord, settings: TimelineSettings | None = None) -> ResolvedInterval:
    """
    Resolve a task's interval and duration figures.

    Args:
        task: Task record snapshot
        settings: Engine settings (defaults to the loaded config)

    Returns:
        ResolvedInterval. Always succeeds since created_at is mandatory.
    """
    settings = settings or get_settings()

    start = task.start_date or task.created_at
    fallback_hours = default_hours(task.priority, settings)
    scheduled_hours = _positive(task.planned_hours) or _positive(task.estimated_hours)
    for field_name in ("planned_hours", "estimated_hours", "actual_hours"):
        raw = getattr(task, field_name)
        if raw is not None and raw > 0 and _positive(raw) is None:
            logger.warning(f"Task {task.id}: ignoring out-of-range {field_name} {raw!r}")

    end = None
    end_source = None
    if task.is_completed:
        if task.completed_date is not None:
            end, end_source = task.completed_date, "completed"
        elif task.updated_at is not None:
            end, end_source = task.updated_at, "last_modified"

    if end is None:
        if task.due_date is not None:
            end, end_source = task.due_date, "due"
        elif scheduled_hours is not None:
            end, end_source = shift_instant(start, timedelta(hours=scheduled_hours)), "duration"
        else:
            end, end_source = shift_instant(start, timedelta(hours=fallback_hours)), "default"

    clamped = False
    if end < start:
        logger.warning(
            f"Task {task.id} ends before it starts ({end.isoformat()} < {start.isoformat()}), "
            "clamping to zero width"
        )
        end = start
        clamped = True

    planned = scheduled_hours
    if planned is None and task.due_date is not None and task.due_date > start:
        planned = _hours_between(start, task.due_date)
    if planned is None:
        planned = fallback_hours

    actual = _positive(task.actual_hours)
    if actual is None:
        actual = _hours_between(start, end) if task.is_completed else 0.0

    return ResolvedInterval(
        start=start,
        end=end,
        planned_hours=planned,
        actual_hours=actual,
        efficiency_percent=efficiency_percent(planned, actual, settings),
        is_overtime=actual > 0 and actual > planned,
        end_source=end_source,
        clamped=clamped,
    )
