"""
Time Axis Generator - tick markers for a window at a chosen granularity.

Ticks start at the window's start and advance one unit at a time (1 hour,
1 day, 7 days, 1 calendar month, 1 calendar year) until the window's end or
the tick cap. Every Nth tick is major and carries a fuller label.
"""

import calendar
import logging
from datetime import datetime, timedelta
from enum import Enum

from timeline.config import TimelineSettings, get_settings
from timeline.models import TickMarker, TimeWindow

logger = logging.getLogger(__name__)

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class Granularity(Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# Every Nth tick is major
MAJOR_EVERY = {
    Granularity.HOURLY: 6,
    Granularity.DAILY: 7,
    Granularity.WEEKLY: 4,
    Granularity.MONTHLY: 4,
    Granularity.YEARLY: 4,
}

_FIXED_STEPS = {
    Granularity.HOURLY: timedelta(hours=1),
    Granularity.DAILY: timedelta(days=1),
    Granularity.WEEKLY: timedelta(days=7),
}

# Shortest possible length of one unit, for tick count estimates
_MIN_UNIT = {
    Granularity.HOURLY: timedelta(hours=1),
    Granularity.DAILY: timedelta(days=1),
    Granularity.WEEKLY: timedelta(days=7),
    Granularity.MONTHLY: timedelta(days=28),
    Granularity.YEARLY: timedelta(days=365),
}


def parse_granularity(value) -> Granularity:
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(str(value).strip().lower())
    except ValueError as e:
        names = ", ".join(g.value for g in Granularity)
        raise ValueError(f"Unknown granularity {value!r} (expected one of: {names})") from e


def add_months(instant: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = instant.month - 1 + months
    year = instant.year + month_index // 12
    month = month_index % 12 + 1
    day = min(instant.day, calendar.monthrange(year, month)[1])
    return instant.replace(year=year, month=month, day=day)


def step(anchor: datetime, granularity: Granularity, count: int) -> datetime:
    """The instant `count` units after `anchor`, always computed from the anchor."""
    if granularity in _FIXED_STEPS:
        return anchor + _FIXED_STEPS[granularity] * count
    if granularity is Granularity.MONTHLY:
        return add_months(anchor, count)
    return add_months(anchor, 12 * count)


def format_label(instant: datetime, granularity: Granularity, major: bool) -> str:
    mon = MONTH_ABBR[instant.month - 1]
    if granularity is Granularity.HOURLY:
        hhmm = f"{instant.hour:02d}:{instant.minute:02d}"
        return f"{mon} {instant.day} {hhmm}" if major else hhmm
    if granularity in (Granularity.DAILY, Granularity.WEEKLY):
        return f"{mon} {instant.day}, {instant.year}" if major else f"{mon} {instant.day}"
    if granularity is Granularity.MONTHLY:
        return f"{mon} {instant.year}" if major else mon
    return str(instant.year)


def generate_ticks(
    window: TimeWindow, granularity, settings: TimelineSettings | None = None
) -> list[TickMarker]:
    """
    Tick markers across a window.

    Args:
        window: Extent or viewport
        granularity: Granularity or its string value
        settings: Engine settings (max_ticks caps the output)

    Returns:
        Ordered list of TickMarker, at most settings.max_ticks long
    """
    settings = settings or get_settings()
    granularity = parse_granularity(granularity)
    major_every = MAJOR_EVERY[granularity]

    ticks: list[TickMarker] = []
    cursor = window.start
    while cursor <= window.end and len(ticks) < settings.max_ticks:
        index = len(ticks)
        major = index % major_every == 0
        ticks.append(
            TickMarker(
                position_percent=window.percent_of(cursor),
                label=format_label(cursor, granularity, major),
                is_major=major,
                instant=cursor,
            )
        )
        try:
            cursor = step(window.start, granularity, index + 1)
        except (OverflowError, ValueError):
            # next unit lies past year 9999
            cursor = None
            break

    if cursor is not None and cursor <= window.end:
        logger.debug(
            f"Tick cap of {settings.max_ticks} reached for {granularity.value} axis "
            f"over {window.duration}"
        )
    return ticks


def suggest_granularity(window: TimeWindow, settings: TimelineSettings | None = None) -> Granularity:
    """Finest granularity whose ticks fit under the cap for this window."""
    settings = settings or get_settings()
    for granularity in Granularity:
        estimated = int(window.duration / _MIN_UNIT[granularity]) + 1
        if estimated <= settings.max_ticks:
            return granularity
    return Granularity.YEARLY
