"""Terminal user interface."""

from casechart.ui.chart import ChartFrame, ChartRenderer
from casechart.ui.messages import Messages
from casechart.ui.render_loop import KEY_BINDINGS, RenderLoop, Screen, action_for_key
from casechart.ui.terminal import AnsiTerminal

__all__ = [
    "ChartFrame",
    "ChartRenderer",
    "Messages",
    "KEY_BINDINGS",
    "RenderLoop",
    "Screen",
    "action_for_key",
    "AnsiTerminal",
]
