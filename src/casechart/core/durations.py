"""Parsing of human readable durations such as '1 hour' or '1h30m'."""

import re
from datetime import timedelta

_UNITS = {
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "hour": 3600,
    "hours": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 604800,
    "week": 604800,
    "weeks": 604800,
}

_TOKEN_RE = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]*)")


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration string.

    A bare number is taken as seconds. Multiple terms are added up,
    so '1h 30m' and '1 hour 30 minutes' are both 90 minutes.
    """
    text = value.strip().lower()
    if not text:
        raise ValueError("empty duration")

    total = 0.0
    pos = 0
    for match in _TOKEN_RE.finditer(text):
        if text[pos:match.start()].strip(" ,"):
            raise ValueError(f"invalid duration: {value!r}")
        amount, unit = match.groups()
        if unit and unit not in _UNITS:
            raise ValueError(f"unknown duration unit {unit!r} in {value!r}")
        total += float(amount) * _UNITS.get(unit, 1)
        pos = match.end()

    if pos == 0 or text[pos:].strip(" ,"):
        raise ValueError(f"invalid duration: {value!r}")
    return timedelta(seconds=total)
