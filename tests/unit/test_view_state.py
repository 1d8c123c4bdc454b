"""
Unit tests for the view zoom state machine.

Tests cover:
- Initial window and presets
- Stepwise zooming around the center
- Clamping at the series edges and for short series
- Quit as terminal state
- Rebinding to a new series
- Window invariants over long random action sequences
"""

import random

import pytest

from casechart.domain.models import Series, ViewWindow, ZoomPreset
from casechart.services import (
    QUIT,
    ZOOM_FULL,
    ZOOM_IN,
    ZOOM_MINIMAL,
    ZOOM_OUT,
    ViewAction,
    ViewStateMachine,
)

from tests.conftest import make_series


def bounds(window: ViewWindow) -> tuple[int, int]:
    return window.start, window.end


# =============================================================================
# PRESET TESTS
# =============================================================================


class TestPresets:
    """Tests for the named zoom presets."""

    def test_starts_with_full_window(self, view: ViewStateMachine):
        assert bounds(view.window) == (0, 10)
        assert view.window.preset == ZoomPreset.FULL
        assert view.visible().counts == list(range(1, 11))

    def test_zoom_minimal_shows_latest_points(self, view: ViewStateMachine):
        """
        GIVEN ten points and a minimum width of three
        WHEN I zoom to the minimal window
        THEN the last three points are visible
        """
        window = view.zoom_minimal()

        assert bounds(window) == (7, 10)
        assert window.preset == ZoomPreset.MINIMAL
        assert view.visible().counts == [8, 9, 10]

    def test_full_minimal_full_is_idempotent(self, view: ViewStateMachine):
        initial = view.window

        view.zoom_minimal()
        view.zoom_full()

        assert view.window == initial

    def test_weeks_preset_anchors_at_latest_point(self, long_series: Series):
        view = ViewStateMachine(long_series, min_width=7, zoom_step=14)

        window = view.zoom_to_weeks(2)

        assert bounds(window) == (86, 100)
        assert window.preset == ZoomPreset.WEEKS
        assert window.weeks == 2

    @pytest.mark.parametrize("weeks,expected_weeks", [(0, 1), (-3, 1), (12, 9)])
    def test_weeks_are_clamped(self, long_series: Series, weeks: int, expected_weeks: int):
        view = ViewStateMachine(long_series, min_width=7, zoom_step=14)

        window = view.zoom_to_weeks(weeks)

        assert window.weeks == expected_weeks
        assert window.width == expected_weeks * 7

    def test_weeks_wider_than_series_show_everything(self, view: ViewStateMachine):
        window = view.zoom_to_weeks(9)

        assert bounds(window) == (0, 10)
        assert window.preset == ZoomPreset.WEEKS


# =============================================================================
# STEPWISE ZOOM TESTS
# =============================================================================


class TestStepwiseZoom:
    """Tests for zoom in / zoom out."""

    def test_zoom_in_shrinks_around_center(self, view: ViewStateMachine):
        """
        GIVEN the full ten-point window and a zoom step of two
        WHEN I zoom in twice
        THEN one point is removed from each side per step
        """
        assert bounds(view.zoom_in()) == (1, 9)
        assert bounds(view.zoom_in()) == (2, 8)
        assert view.window.preset == ZoomPreset.CUSTOM

    def test_zoom_in_stops_at_min_width(self, view: ViewStateMachine):
        for _ in range(10):
            view.zoom_in()

        assert view.window.width == 3

    def test_zoom_in_at_minimal_is_a_no_op(self, view: ViewStateMachine):
        view.zoom_minimal()

        window = view.zoom_in()

        assert bounds(window) == (7, 10)
        assert window.preset == ZoomPreset.MINIMAL

    def test_zoom_out_from_minimal_is_shifted_inside(self, view: ViewStateMachine):
        """
        GIVEN the minimal window at the end of the series
        WHEN I zoom out
        THEN the wider window is shifted back inside the series
        """
        view.zoom_minimal()

        window = view.zoom_out()

        assert bounds(window) == (5, 10)
        assert window.preset == ZoomPreset.CUSTOM

    def test_zoom_out_to_whole_series_becomes_full(self, view: ViewStateMachine):
        view.zoom_in()

        window = view.zoom_out()

        assert bounds(window) == (0, 10)
        assert window.preset == ZoomPreset.FULL

    def test_zoom_out_at_full_is_a_no_op(self, view: ViewStateMachine):
        assert bounds(view.zoom_out()) == (0, 10)

    def test_zoom_in_then_out_returns_to_previous_window(self, long_series: Series):
        view = ViewStateMachine(long_series, min_width=7, zoom_step=14)
        view.zoom_in()
        before = view.window

        view.zoom_in()
        view.zoom_out()

        assert bounds(view.window) == bounds(before)

    def test_apply_dispatches_actions(self, view: ViewStateMachine):
        assert bounds(view.apply(ZOOM_IN)) == (1, 9)
        assert bounds(view.apply(ZOOM_OUT)) == (0, 10)
        assert bounds(view.apply(ZOOM_MINIMAL)) == (7, 10)
        assert bounds(view.apply(ZOOM_FULL)) == (0, 10)
        assert view.apply(ViewAction.weeks_preset(1)).preset == ZoomPreset.WEEKS


# =============================================================================
# EDGE CASE TESTS
# =============================================================================


class TestEdgeCases:
    """Tests for short series and invalid configuration."""

    def test_series_shorter_than_min_width(self):
        """
        GIVEN two points and a minimum width of seven
        WHEN I use any preset
        THEN the window is the whole series
        """
        view = ViewStateMachine(make_series([3, 4]), min_width=7, zoom_step=14)

        assert bounds(view.zoom_minimal()) == (0, 2)
        assert bounds(view.zoom_in()) == (0, 2)
        assert bounds(view.zoom_to_weeks(1)) == (0, 2)
        assert bounds(view.zoom_full()) == (0, 2)

    def test_single_point_series(self):
        view = ViewStateMachine(make_series([3]), min_width=7, zoom_step=14)

        view.zoom_in()
        view.zoom_out()

        assert bounds(view.window) == (0, 1)
        assert len(view.visible()) == 1

    @pytest.mark.parametrize("min_width,zoom_step", [(0, 14), (7, 0)])
    def test_invalid_configuration_raises(self, ten_point_series: Series, min_width: int, zoom_step: int):
        with pytest.raises(ValueError):
            ViewStateMachine(ten_point_series, min_width=min_width, zoom_step=zoom_step)


# =============================================================================
# QUIT TESTS
# =============================================================================


class TestQuit:
    """Quit is terminal."""

    def test_transitions_after_quit_are_ignored(self, view: ViewStateMachine):
        view.zoom_in()
        window = view.window

        view.apply(QUIT)

        assert view.is_quit
        assert view.zoom_in() == window
        assert view.zoom_out() == window
        assert view.zoom_full() == window
        assert view.zoom_minimal() == window
        assert view.zoom_to_weeks(2) == window


# =============================================================================
# REBIND TESTS
# =============================================================================


class TestRebind:
    """Tests for switching to a refreshed series."""

    def test_full_stays_full(self, view: ViewStateMachine):
        window = view.rebind(make_series(range(20)))

        assert bounds(window) == (0, 20)
        assert window.preset == ZoomPreset.FULL

    def test_minimal_follows_latest_point(self, view: ViewStateMachine):
        view.zoom_minimal()

        assert bounds(view.rebind(make_series(range(20)))) == (17, 20)

    def test_weeks_keep_week_count(self, long_series: Series):
        view = ViewStateMachine(long_series, min_width=7, zoom_step=14)
        view.zoom_to_weeks(2)

        window = view.rebind(make_series(range(110)))

        assert bounds(window) == (96, 110)
        assert window.weeks == 2

    def test_custom_keeps_width_and_distance_to_latest(self, long_series: Series):
        """
        GIVEN a custom window seven points before the end of 100 points
        WHEN the series grows to 110 points
        THEN the window keeps its width and distance to the latest point
        """
        view = ViewStateMachine(long_series, min_width=7, zoom_step=14)
        assert bounds(view.zoom_in()) == (7, 93)

        window = view.rebind(make_series(range(110)))

        assert bounds(window) == (17, 103)
        assert window.preset == ZoomPreset.CUSTOM

    def test_custom_is_clamped_into_shorter_series(self, long_series: Series):
        view = ViewStateMachine(long_series, min_width=7, zoom_step=14)
        view.zoom_in()

        window = view.rebind(make_series(range(20)))

        assert bounds(window) == (0, 20)


# =============================================================================
# INVARIANT TESTS
# =============================================================================


class TestInvariants:
    """The window is always valid, whatever the sequence of actions."""

    ACTIONS = [ZOOM_IN, ZOOM_OUT, ZOOM_FULL, ZOOM_MINIMAL] + [
        ViewAction.weeks_preset(weeks) for weeks in range(1, 10)
    ]

    @pytest.mark.parametrize("length", [1, 2, 6, 7, 8, 30, 100])
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_window_stays_valid(self, length: int, seed: int):
        rng = random.Random(seed)
        series = make_series([rng.randint(0, 500) for _ in range(length)])
        view = ViewStateMachine(series, min_width=7, zoom_step=rng.randint(1, 20))

        for _ in range(500):
            window = view.apply(rng.choice(self.ACTIONS))

            assert 0 <= window.start < window.end <= length
            assert window.width >= min(7, length)
            assert len(view.visible()) == window.width
