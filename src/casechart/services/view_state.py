"""Zoom state machine for the visible chart window."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from casechart.domain.models import Series, SeriesSlice, ViewWindow, ZoomPreset

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
MIN_WEEKS = 1
MAX_WEEKS = 9


class ActionKind(str, Enum):
    """Transitions of the view state machine."""

    ZOOM_IN = "ZOOM_IN"
    ZOOM_OUT = "ZOOM_OUT"
    ZOOM_FULL = "ZOOM_FULL"
    ZOOM_MINIMAL = "ZOOM_MINIMAL"
    ZOOM_WEEKS = "ZOOM_WEEKS"
    QUIT = "QUIT"


@dataclass(frozen=True)
class ViewAction:
    """A transition request; weeks is only used by ZOOM_WEEKS."""

    kind: ActionKind
    weeks: Optional[int] = None

    @classmethod
    def weeks_preset(cls, weeks: int) -> "ViewAction":
        return cls(ActionKind.ZOOM_WEEKS, weeks)


ZOOM_IN = ViewAction(ActionKind.ZOOM_IN)
ZOOM_OUT = ViewAction(ActionKind.ZOOM_OUT)
ZOOM_FULL = ViewAction(ActionKind.ZOOM_FULL)
ZOOM_MINIMAL = ViewAction(ActionKind.ZOOM_MINIMAL)
QUIT = ViewAction(ActionKind.QUIT)


class ViewStateMachine:
    """
    Owns the visible window over a fixed series.

    State is (start, end, preset). Every transition ends in a window with
    0 <= start < end <= len(series) that is at least min_width points wide,
    unless the whole series is shorter than that. Ideal windows that stick
    out of the series are shifted back in first and only shrunk when the
    series is too short. After quit() all transitions are ignored.
    """

    def __init__(self, series: Series, min_width: int = 7, zoom_step: int = 14):
        if min_width < 1:
            raise ValueError(f"min_width must be positive, got {min_width}")
        if zoom_step < 1:
            raise ValueError(f"zoom_step must be positive, got {zoom_step}")

        self._series = series
        self._min_width = min_width
        self._zoom_step = zoom_step
        self._quit = False
        self._window = self._full_window()

    @property
    def window(self) -> ViewWindow:
        return self._window

    @property
    def series(self) -> Series:
        return self._series

    @property
    def min_width(self) -> int:
        return self._min_width

    @property
    def is_quit(self) -> bool:
        return self._quit

    def visible(self) -> SeriesSlice:
        """Points and rolling average inside the current window."""
        return self._series.slice(self._window.start, self._window.end)

    # Transitions

    def zoom_in(self) -> ViewWindow:
        """Shrink the window around its center by one zoom step."""
        if self._quit:
            return self._window
        current = self._window
        width = max(current.width - self._zoom_step, self._min_width)
        if width >= current.width:
            return current
        removed = current.width - width
        return self._set(self._clamped(current.start + removed // 2, width, ZoomPreset.CUSTOM))

    def zoom_out(self) -> ViewWindow:
        """Grow the window around its center by one zoom step."""
        if self._quit:
            return self._window
        current = self._window
        total = len(self._series)
        width = min(current.width + self._zoom_step, total)
        if width <= current.width:
            return current
        added = width - current.width
        preset = ZoomPreset.FULL if width == total else ZoomPreset.CUSTOM
        return self._set(self._clamped(current.start - added // 2, width, preset))

    def zoom_full(self) -> ViewWindow:
        """Show the entire series."""
        if self._quit:
            return self._window
        return self._set(self._full_window())

    def zoom_minimal(self) -> ViewWindow:
        """Show min_width points at the most recent end."""
        if self._quit:
            return self._window
        return self._set(self._minimal_window())

    def zoom_to_weeks(self, weeks: int) -> ViewWindow:
        """Show the last weeks * 7 points; weeks is clamped to 1..9."""
        if self._quit:
            return self._window
        return self._set(self._weeks_window(weeks))

    def quit(self) -> None:
        """Enter the terminal state."""
        self._quit = True

    def apply(self, action: ViewAction) -> ViewWindow:
        """Dispatch an action to its transition."""
        if action.kind == ActionKind.ZOOM_IN:
            return self.zoom_in()
        if action.kind == ActionKind.ZOOM_OUT:
            return self.zoom_out()
        if action.kind == ActionKind.ZOOM_FULL:
            return self.zoom_full()
        if action.kind == ActionKind.ZOOM_MINIMAL:
            return self.zoom_minimal()
        if action.kind == ActionKind.ZOOM_WEEKS:
            return self.zoom_to_weeks(action.weeks or MIN_WEEKS)
        self.quit()
        return self._window

    def rebind(self, series: Series) -> ViewWindow:
        """Switch to a new series and recompute the window from the current preset."""
        current = self._window
        end_offset = len(self._series) - current.end
        self._series = series

        if current.preset == ZoomPreset.FULL:
            window = self._full_window()
        elif current.preset == ZoomPreset.MINIMAL:
            window = self._minimal_window()
        elif current.preset == ZoomPreset.WEEKS:
            window = self._weeks_window(current.weeks or MIN_WEEKS)
        else:
            # keep the width and the distance to the most recent point
            end = len(series) - end_offset
            window = self._clamped(end - current.width, current.width, ZoomPreset.CUSTOM)
        return self._set(window)

    # Window arithmetic

    def _full_window(self) -> ViewWindow:
        return ViewWindow(0, len(self._series), ZoomPreset.FULL)

    def _minimal_window(self) -> ViewWindow:
        total = len(self._series)
        return self._clamped(total - self._min_width, self._min_width, ZoomPreset.MINIMAL)

    def _weeks_window(self, weeks: int) -> ViewWindow:
        weeks = min(max(weeks, MIN_WEEKS), MAX_WEEKS)
        width = weeks * DAYS_PER_WEEK
        total = len(self._series)
        return self._clamped(total - width, width, ZoomPreset.WEEKS, weeks)

    def _clamped(
        self,
        start: int,
        width: int,
        preset: ZoomPreset,
        weeks: Optional[int] = None,
    ) -> ViewWindow:
        total = len(self._series)
        width = min(max(width, self._min_width), total)
        start = min(max(start, 0), total - width)
        return ViewWindow(start, start + width, preset, weeks)

    def _set(self, window: ViewWindow) -> ViewWindow:
        if window != self._window:
            logger.debug(
                "View window %s [%d, %d) -> %s [%d, %d)",
                self._window.preset.value,
                self._window.start,
                self._window.end,
                window.preset.value,
                window.start,
                window.end,
            )
        self._window = window
        return window
