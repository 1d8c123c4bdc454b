"""ANSI terminal screen: raw keyboard input and full-screen drawing."""

import logging
import os
import select
import shutil
import sys
import time
from collections import deque
from typing import Optional, TextIO

from casechart.core.exceptions import TerminalError
from casechart.ui.chart import ChartFrame, ChartRenderer
from casechart.ui.events import (
    DOWN,
    END,
    Event,
    HOME,
    KeyEvent,
    LEFT,
    ResizeEvent,
    RIGHT,
    UP,
    decode_keys,
)

logger = logging.getLogger(__name__)

ENTER_SCREEN = "\x1b[?1049h\x1b[?25l"
LEAVE_SCREEN = "\x1b[?25h\x1b[?1049l"
CURSOR_HOME = "\x1b[H"
CLEAR_LINE_END = "\x1b[K"
CLEAR_SCREEN_END = "\x1b[J"

# Second byte of Windows console special-key sequences
_WINDOWS_SPECIAL_KEYS = {
    "H": UP,
    "P": DOWN,
    "K": LEFT,
    "M": RIGHT,
    "G": HOME,
    "O": END,
}


class AnsiTerminal:
    """
    Full-screen terminal for the chart.

    Use as a context manager: entering switches to the alternate screen and
    unbuffered, no-echo input with signals disabled (so Ctrl-C arrives as a
    key), leaving restores the terminal on every exit path.
    """

    def __init__(
        self,
        renderer: ChartRenderer,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self._renderer = renderer
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._saved_attrs = None
        self._pending: deque[str] = deque()
        self._size = shutil.get_terminal_size()

    def __enter__(self) -> "AnsiTerminal":
        if not self._stdin.isatty() or not self._stdout.isatty():
            raise TerminalError("The chart needs an interactive terminal (stdin and stdout must be a TTY)")
        try:
            if os.name != "nt":
                self._enter_raw_mode()
            self._write(ENTER_SCREEN)
        except OSError as exc:
            raise TerminalError(f"Could not set up the terminal: {exc}") from exc
        self._size = shutil.get_terminal_size()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self._write(LEAVE_SCREEN)
        finally:
            if self._saved_attrs is not None:
                import termios

                termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
                self._saved_attrs = None

    def draw(self, frame: ChartFrame) -> None:
        """Render the frame over the previous one without clearing first."""
        width, height = self._size.columns, self._size.lines
        lines = self._renderer.render(frame, width, height)
        output = CURSOR_HOME + (CLEAR_LINE_END + "\r\n").join(lines) + CLEAR_LINE_END + CLEAR_SCREEN_END
        try:
            self._write(output)
        except OSError as exc:
            raise TerminalError(f"Could not draw to the terminal: {exc}") from exc

    def poll_event(self, timeout: float) -> Optional[Event]:
        """Wait up to timeout seconds for a key press or a size change."""
        size = shutil.get_terminal_size()
        if size != self._size:
            self._size = size
            return ResizeEvent(size.columns, size.lines)

        if not self._pending:
            try:
                keys = self._read_windows(timeout) if os.name == "nt" else self._read_posix(timeout)
            except OSError as exc:
                raise TerminalError(f"Could not read from the terminal: {exc}") from exc
            self._pending.extend(keys)

        if self._pending:
            return KeyEvent(self._pending.popleft())
        return None

    def _enter_raw_mode(self) -> None:
        import termios

        fd = self._stdin.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        attrs = termios.tcgetattr(fd)
        attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        attrs[6][termios.VMIN] = 1
        attrs[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSAFLUSH, attrs)

    def _read_posix(self, timeout: float) -> list[str]:
        fd = self._stdin.fileno()
        readable, _, _ = select.select([fd], [], [], timeout)
        if not readable:
            return []
        data = os.read(fd, 64)
        if not data:
            raise TerminalError("Terminal input was closed")
        return decode_keys(data.decode("utf-8", errors="replace"))

    def _read_windows(self, timeout: float) -> list[str]:
        import msvcrt

        deadline = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return []
            time.sleep(0.02)

        char = msvcrt.getwch()
        if char in ("\x00", "\xe0"):
            key = _WINDOWS_SPECIAL_KEYS.get(msvcrt.getwch())
            return [key] if key else []
        chars = [char]
        while msvcrt.kbhit():
            chars.append(msvcrt.getwch())
        return decode_keys("".join(chars))

    def _write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()
