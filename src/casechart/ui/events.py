"""Input events and decoding of terminal key sequences."""

from dataclasses import dataclass
from typing import Union

# Key names for non-printable keys; printable keys are the character itself
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
HOME = "home"
END = "end"
ESCAPE = "esc"
CTRL_C = "ctrl-c"

_ESCAPE_SEQUENCES = {
    "[A": UP,
    "[B": DOWN,
    "[C": RIGHT,
    "[D": LEFT,
    "[H": HOME,
    "[F": END,
    "OA": UP,
    "OB": DOWN,
    "OC": RIGHT,
    "OD": LEFT,
    "OH": HOME,
    "OF": END,
    "[1~": HOME,
    "[7~": HOME,
    "[4~": END,
    "[8~": END,
}


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[KeyEvent, ResizeEvent]


def decode_keys(data: str) -> list[str]:
    """
    Split raw terminal input into key names.

    Arrow, Home and End escape sequences (CSI and SS3 forms) become their
    key names, Ctrl-C becomes 'ctrl-c', letters are lower-cased and any
    other escape sequence is dropped.
    """
    keys = []
    index = 0
    while index < len(data):
        char = data[index]
        if char == "\x03":
            keys.append(CTRL_C)
            index += 1
        elif char == "\x1b":
            length = _escape_length(data, index)
            if length == 1:
                keys.append(ESCAPE)
            else:
                name = _ESCAPE_SEQUENCES.get(data[index + 1:index + length])
                if name:
                    keys.append(name)
            index += length
        else:
            if char.isprintable():
                keys.append(char.lower())
            index += 1
    return keys


def _escape_length(data: str, start: int) -> int:
    """Length of the escape sequence starting at data[start] (ESC included)."""
    if start + 1 >= len(data):
        return 1
    intro = data[start + 1]
    if intro == "O":
        return min(3, len(data) - start)
    if intro != "[":
        return 1
    index = start + 2
    # parameter bytes, then one final byte in 0x40..0x7e
    while index < len(data) and "0" <= data[index] <= "?":
        index += 1
    if index < len(data):
        index += 1
    return index - start
