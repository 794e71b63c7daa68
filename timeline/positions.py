"""
Position Mapper - resolved intervals onto the normalized [0, 100] axis.
"""

from datetime import datetime

from timeline.models import BarPosition, ResolvedInterval, TaskRecord, TimeWindow

MIN_WIDTH_PERCENT = 1.0


def _clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def map_position(interval: ResolvedInterval, window: TimeWindow) -> BarPosition:
    """
    Bar geometry of an interval within a window (extent or viewport).

    Width never drops below 1% so every bar stays visible and clickable.
    Intervals outside the window are clamped to the edge, not dropped.
    """
    start_percent = _clamp(0.0, 100.0, window.percent_of(interval.start))
    width_percent = _clamp(MIN_WIDTH_PERCENT, 100.0, interval.duration / window.duration * 100)
    return BarPosition(start_percent=start_percent, width_percent=width_percent)


def now_marker_position(now: datetime | None, window: TimeWindow) -> float | None:
    """Percent offset of "now" in the window, or None when it falls outside."""
    if now is None or not window.contains(now):
        return None
    return window.percent_of(now)


def is_overdue(task: TaskRecord, interval: ResolvedInterval, now: datetime | None) -> bool:
    """An unfinished task whose resolved end is already behind us."""
    if now is None or task.is_completed:
        return False
    return interval.end < now
