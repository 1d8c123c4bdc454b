"""Main loop: draw the visible window, wait for input, apply zoom actions."""

import logging
from typing import Optional, Protocol

from casechart.core.exceptions import TerminalError
from casechart.services.data_service import LoadedSeries
from casechart.services.view_state import (
    QUIT,
    ZOOM_FULL,
    ZOOM_IN,
    ZOOM_MINIMAL,
    ZOOM_OUT,
    ViewAction,
    ViewStateMachine,
)
from casechart.ui.chart import ChartFrame
from casechart.ui.events import CTRL_C, DOWN, END, Event, HOME, KeyEvent, LEFT, RIGHT, UP

logger = logging.getLogger(__name__)

KEY_BINDINGS: dict[str, ViewAction] = {
    UP: ZOOM_IN,
    RIGHT: ZOOM_IN,
    DOWN: ZOOM_OUT,
    LEFT: ZOOM_OUT,
    HOME: ZOOM_FULL,
    END: ZOOM_MINIMAL,
    "q": QUIT,
    CTRL_C: QUIT,
    **{str(weeks): ViewAction.weeks_preset(weeks) for weeks in range(1, 10)},
}


def action_for_key(key: str) -> Optional[ViewAction]:
    """Look up the zoom action bound to a key; unbound keys map to None."""
    return KEY_BINDINGS.get(key)


class Screen(Protocol):
    """Drawing and input collaborator of the render loop."""

    def draw(self, frame: ChartFrame) -> None:
        ...

    def poll_event(self, timeout: float) -> Optional[Event]:
        """Return the next event, or None when timeout seconds pass without one."""
        ...


class RenderLoop:
    """
    Single-threaded draw/poll loop.

    Every iteration redraws the current window, then blocks for at most
    poll_timeout seconds on input. Key events go through KEY_BINDINGS into
    the view state machine; resize events only cause the next redraw.
    Screen failures are fatal and end the loop with TerminalError.
    """

    def __init__(
        self,
        view: ViewStateMachine,
        screen: Screen,
        loaded: LoadedSeries,
        region_name: str,
        population: Optional[int] = None,
        poll_timeout: float = 0.25,
    ):
        self._view = view
        self._screen = screen
        self._loaded = loaded
        self._region_name = region_name
        self._incidence = view.series.incidence(population) if population else None
        self._poll_timeout = poll_timeout

    def run(self) -> int:
        """Run until a quit key is pressed; returns the process exit code."""
        while not self._view.is_quit:
            try:
                self._screen.draw(self.frame())
                event = self._screen.poll_event(self._poll_timeout)
            except OSError as exc:
                raise TerminalError(f"Terminal I/O failed: {exc}") from exc
            self.handle(event)
        logger.debug("Render loop finished")
        return 0

    def handle(self, event: Optional[Event]) -> None:
        """Route one event; None (timeout) and resizes just lead to a redraw."""
        if not isinstance(event, KeyEvent):
            return
        action = action_for_key(event.key)
        if action is None:
            logger.debug("Ignoring key %r", event.key)
            return
        self._view.apply(action)

    def frame(self) -> ChartFrame:
        """Build the frame for the current window."""
        window = self._view.window
        incidence = self._incidence[window.end - 1] if self._incidence else None
        return ChartFrame(
            visible=self._view.visible(),
            window=window,
            total_points=len(self._view.series),
            region=self._region_name,
            origin=self._loaded.origin,
            fetched_at=self._loaded.fetched_at,
            incidence=incidence,
        )
