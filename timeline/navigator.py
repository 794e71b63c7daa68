"""
Viewport Navigator - bounded pan/zoom of a sub-window of the project extent.

A viewport of None means "show the full extent". Whenever a viewport is set:

    extent.start <= viewport.start < viewport.end <= extent.end

Every operation re-clamps against the extent passed in, so a viewport left
over from a larger task set is pulled back inside (or dropped) rather than
trusted.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum

from timeline.config import TimelineSettings, get_settings
from timeline.models import TimeWindow

logger = logging.getLogger(__name__)


class PanDirection(Enum):
    PREV = "prev"
    NEXT = "next"


class ZoomDirection(Enum):
    IN = "in"
    OUT = "out"


def _parse_direction(value, enum_cls):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as e:
        names = ", ".join(d.value for d in enum_cls)
        raise ValueError(f"Unknown direction {value!r} (expected one of: {names})") from e


def clamp_window(start: datetime, end: datetime, extent: TimeWindow) -> TimeWindow:
    """
    Fit a [start, end] span inside the extent.

    The span is capped at the extent's duration; a span hanging over one side
    snaps to that boundary and keeps its width.
    """
    duration = min(end - start, extent.duration)
    end = start + duration
    if start < extent.start:
        start, end = extent.start, extent.start + duration
    if end > extent.end:
        start, end = extent.end - duration, extent.end
    return TimeWindow(start=start, end=end)


def _place(offset: timedelta, duration: timedelta, extent: TimeWindow) -> TimeWindow:
    """A window of `duration` starting `offset` into the extent, slid back inside if needed."""
    duration = min(duration, extent.duration)
    offset = max(timedelta(0), min(offset, extent.duration - duration))
    start = extent.start + offset
    return TimeWindow(start=start, end=start + duration)


def fit_viewport(viewport: TimeWindow | None, extent: TimeWindow | None) -> TimeWindow | None:
    """Re-clamp a stored viewport against the current extent; None if it no longer overlaps."""
    if viewport is None or extent is None:
        return None
    if viewport.end <= extent.start or viewport.start >= extent.end:
        logger.info("Viewport %s .. %s lies outside the extent, resetting", viewport.start, viewport.end)
        return None
    return clamp_window(viewport.start, viewport.end, extent)


def pan_window(
    window: TimeWindow,
    extent: TimeWindow,
    direction,
    settings: TimelineSettings | None = None,
) -> TimeWindow:
    """Shift a window by pan_fraction of its own duration, clamped to the extent."""
    settings = settings or get_settings()
    direction = _parse_direction(direction, PanDirection)
    shift = window.duration * settings.pan_fraction
    if direction is PanDirection.PREV:
        shift = -shift
    return _place(window.start - extent.start + shift, window.duration, extent)


def zoom_window(
    window: TimeWindow,
    extent: TimeWindow,
    direction,
    settings: TimelineSettings | None = None,
) -> TimeWindow:
    """
    Halve (in) or double (out) a window around its center, clamped to the extent.

    Zooming out never exceeds the extent's duration; zooming in never goes
    below min_viewport_hours.
    """
    settings = settings or get_settings()
    direction = _parse_direction(direction, ZoomDirection)
    center = window.center

    if direction is ZoomDirection.IN:
        floor = min(timedelta(hours=settings.min_viewport_hours), extent.duration)
        duration = max(window.duration / 2, floor)
    else:
        duration = min(window.duration * 2, extent.duration)

    return _place(center - extent.start - duration / 2, duration, extent)


class ViewportNavigator:
    """
    Owns the current viewport.

    Each transition computes a complete new TimeWindow and swaps it in with a
    single assignment, so readers never see a half-updated window.

    Usage:
        nav = ViewportNavigator()
        nav.zoom("in", extent)
        nav.pan("next", extent)
        window = nav.current_window(extent)
        nav.reset()
    """

    def __init__(self, viewport: TimeWindow | None = None, settings: TimelineSettings | None = None):
        self._viewport = viewport
        self._settings = settings

    @property
    def settings(self) -> TimelineSettings:
        return self._settings or get_settings()

    @property
    def viewport(self) -> TimeWindow | None:
        return self._viewport

    def current_window(self, extent: TimeWindow | None) -> TimeWindow | None:
        """The window to render: the re-clamped viewport, else the full extent."""
        if extent is None:
            return None
        return fit_viewport(self._viewport, extent) or extent

    def pan(self, direction, extent: TimeWindow | None) -> TimeWindow | None:
        if extent is None:
            logger.debug("pan ignored: no extent")
            return self._viewport
        window = self.current_window(extent)
        self._viewport = pan_window(window, extent, direction, self.settings)
        return self._viewport

    def zoom(self, direction, extent: TimeWindow | None) -> TimeWindow | None:
        if extent is None:
            logger.debug("zoom ignored: no extent")
            return self._viewport
        window = self.current_window(extent)
        self._viewport = zoom_window(window, extent, direction, self.settings)
        return self._viewport

    def reset(self) -> None:
        self._viewport = None
