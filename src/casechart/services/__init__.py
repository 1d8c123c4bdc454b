"""Service layer - orchestration and view state."""

from casechart.services.data_service import DataService, LoadedSeries
from casechart.services.view_state import (
    ActionKind,
    ViewAction,
    ViewStateMachine,
    ZOOM_IN,
    ZOOM_OUT,
    ZOOM_FULL,
    ZOOM_MINIMAL,
    QUIT,
)

__all__ = [
    "DataService",
    "LoadedSeries",
    "ActionKind",
    "ViewAction",
    "ViewStateMachine",
    "ZOOM_IN",
    "ZOOM_OUT",
    "ZOOM_FULL",
    "ZOOM_MINIMAL",
    "QUIT",
]
