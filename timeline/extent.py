"""
Timeline Extent Calculator.

The extent is the padded union of every resolved interval in the (filtered)
task set. It is the fixed outer bound for all views; the viewport never
leaves it.
"""

import logging
from collections.abc import Iterable

from timeline.config import TimelineSettings, get_settings
from timeline.models import DAY, ResolvedInterval, TimeWindow, shift_instant

logger = logging.getLogger(__name__)


def compute_extent(
    intervals: Iterable[ResolvedInterval], settings: TimelineSettings | None = None
) -> TimeWindow | None:
    """
    Compute the padded project window.

    padding = max(min_padding_days, padding_ratio * total days), applied on
    both sides, so even a single zero-width task gets a non-empty extent.

    Returns:
        TimeWindow, or None when there are no intervals (nothing to render).
    """
    settings = settings or get_settings()
    intervals = list(intervals)
    if not intervals:
        logger.debug("No intervals, no extent")
        return None

    min_start = min(iv.start for iv in intervals)
    max_end = max(iv.end for iv in intervals)

    total_days = (max_end - min_start) / DAY
    padding_days = max(settings.min_padding_days, settings.padding_ratio * total_days)
    padding = DAY * padding_days

    # Pinned to the calendar's ends for tasks dated near year 1 or 9999
    return TimeWindow(start=shift_instant(min_start, -padding), end=shift_instant(max_end, padding))
