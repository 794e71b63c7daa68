"""
Tests for the viewport navigator - pan/zoom bounded by the project extent.
"""

from datetime import datetime, timedelta, timezone

import pytest

from timeline.config import TimelineSettings
from timeline.models import MAX_INSTANT, TimeWindow
from timeline.navigator import (
    ViewportNavigator,
    clamp_window,
    fit_viewport,
    pan_window,
    zoom_window,
)

from tests.fixtures import DAY0, day

EXTENT = TimeWindow(start=day(0), end=day(100))


def assert_inside(window: TimeWindow, extent: TimeWindow = EXTENT):
    assert extent.start <= window.start < window.end <= extent.end


class TestZoom:
    def test_three_zoom_ins_from_full_extent(self, settings):
        """100-day extent, zoom in x3 -> 12.5 days around the same midpoint."""
        nav = ViewportNavigator(settings=settings)
        for _ in range(3):
            nav.zoom("in", EXTENT)
        vp = nav.viewport
        assert vp.duration == timedelta(days=12.5)
        assert vp.center == day(50)

    def test_zoom_out_never_exceeds_extent(self, settings):
        nav = ViewportNavigator(settings=settings)
        nav.zoom("out", EXTENT)
        assert nav.viewport == EXTENT

    def test_zoom_out_converges_on_extent(self, settings):
        nav = ViewportNavigator(TimeWindow(day(80), day(90)), settings=settings)
        for _ in range(5):
            nav.zoom("out", EXTENT)
            assert_inside(nav.viewport)
        assert nav.viewport == EXTENT

    def test_zoom_out_near_edge_is_clamped(self, settings):
        window = zoom_window(TimeWindow(day(90), day(100)), EXTENT, "out", settings)
        assert window == TimeWindow(day(80), day(100))

    def test_zoom_in_floor(self, settings):
        extent = TimeWindow(DAY0, DAY0 + timedelta(hours=4))
        window = extent
        for _ in range(5):
            window = zoom_window(window, extent, "in", settings)
        assert window.duration == timedelta(hours=1)
        assert_inside(window, extent)

    def test_zoom_in_floor_never_exceeds_tiny_extent(self, settings):
        extent = TimeWindow(DAY0, DAY0 + timedelta(minutes=30))
        window = zoom_window(extent, extent, "in", settings)
        assert window == extent

    def test_direction_case_insensitive(self, settings):
        assert zoom_window(EXTENT, EXTENT, "IN", settings).duration == timedelta(days=50)


class TestPan:
    def test_pan_shifts_half_a_window(self, settings):
        window = pan_window(TimeWindow(day(40), day(60)), EXTENT, "next", settings)
        assert window == TimeWindow(day(50), day(70))

    def test_pan_prev(self, settings):
        window = pan_window(TimeWindow(day(40), day(60)), EXTENT, "prev", settings)
        assert window == TimeWindow(day(30), day(50))

    def test_pan_clamps_at_end_keeping_width(self, settings):
        window = pan_window(TimeWindow(day(85), day(95)), EXTENT, "next", settings)
        assert window == TimeWindow(day(90), day(100))

    def test_pan_clamps_at_start(self, settings):
        window = pan_window(TimeWindow(day(2), day(22)), EXTENT, "prev", settings)
        assert window == TimeWindow(day(0), day(20))

    def test_pan_full_extent_is_noop(self, settings):
        assert pan_window(EXTENT, EXTENT, "next", settings) == EXTENT

    def test_custom_pan_fraction(self):
        custom = TimelineSettings(pan_fraction=0.25)
        window = pan_window(TimeWindow(day(40), day(60)), EXTENT, "next", custom)
        assert window == TimeWindow(day(45), day(65))

    def test_unknown_direction(self, settings):
        with pytest.raises(ValueError, match="sideways"):
            pan_window(EXTENT, EXTENT, "sideways", settings)


class TestNavigatorState:
    def test_starts_on_full_extent(self, settings):
        nav = ViewportNavigator(settings=settings)
        assert nav.viewport is None
        assert nav.current_window(EXTENT) == EXTENT

    def test_reset(self, settings):
        nav = ViewportNavigator(settings=settings)
        nav.zoom("in", EXTENT)
        nav.reset()
        assert nav.viewport is None
        assert nav.current_window(EXTENT) == EXTENT

    def test_no_extent_is_noop(self, settings):
        viewport = TimeWindow(day(10), day(20))
        nav = ViewportNavigator(viewport, settings=settings)
        assert nav.pan("next", None) == viewport
        assert nav.zoom("in", None) == viewport
        assert nav.current_window(None) is None

    def test_mixed_sequence_stays_inside(self, settings):
        nav = ViewportNavigator(settings=settings)
        for action in ["in", "next", "next", "in", "next", "next", "next", "out", "prev"]:
            if action in ("in", "out"):
                nav.zoom(action, EXTENT)
            else:
                nav.pan(action, EXTENT)
            assert_inside(nav.viewport)

    def test_stale_viewport_outside_extent_falls_back(self, settings):
        nav = ViewportNavigator(TimeWindow(day(200), day(210)), settings=settings)
        assert nav.current_window(EXTENT) == EXTENT

    def test_stale_viewport_overlapping_is_clamped(self, settings):
        nav = ViewportNavigator(TimeWindow(day(90), day(120)), settings=settings)
        assert nav.current_window(EXTENT) == TimeWindow(day(70), day(100))

    def test_stale_viewport_after_extent_shrinks(self, settings):
        nav = ViewportNavigator(TimeWindow(day(10), day(90)), settings=settings)
        small = TimeWindow(day(20), day(30))
        nav.pan("next", small)
        assert_inside(nav.viewport, small)


class TestHelpers:
    def test_clamp_caps_duration(self):
        assert clamp_window(day(-10), day(150), EXTENT) == EXTENT

    def test_fit_none(self):
        assert fit_viewport(None, EXTENT) is None
        assert fit_viewport(TimeWindow(day(1), day(2)), None) is None

    def test_fit_touching_edge_is_outside(self):
        assert fit_viewport(TimeWindow(day(100), day(110)), EXTENT) is None

    def test_navigation_at_calendar_end(self, settings):
        extent = TimeWindow(datetime(9999, 12, 20, tzinfo=timezone.utc), MAX_INSTANT)
        nav = ViewportNavigator(settings=settings)
        nav.zoom("in", extent)
        for _ in range(5):
            nav.pan("next", extent)
            assert_inside(nav.viewport, extent)
        assert nav.viewport.end == MAX_INSTANT
        nav.zoom("out", extent)
        assert_inside(nav.viewport, extent)
