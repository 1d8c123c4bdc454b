"""Timezone and date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Union

import pytz
from dateutil import parser as date_parser

UTC_TZ = pytz.UTC

# German open-data portals publish dates day first
_DOTTED_DATE_FORMAT = "%d.%m.%Y"


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC_TZ)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # Assume naive datetime is already UTC
        return UTC_TZ.localize(dt)
    return dt.astimezone(UTC_TZ)


def parse_datetime_utc(value: str) -> datetime:
    """
    Parse an ISO-8601 datetime string and return it in UTC.

    If no timezone is provided in the string, assumes UTC.
    """
    return to_utc(date_parser.isoparse(value))


def parse_source_date(value: Union[str, int, float]) -> date:
    """
    Parse a calendar date as published by the remote data source.

    Accepts ISO dates (with or without a time part), DD.MM.YYYY and
    epoch milliseconds. Raises ValueError for anything else.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"not a date: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, UTC_TZ).date()

    text = value.strip()
    if "." in text and "-" not in text:
        return datetime.strptime(text, _DOTTED_DATE_FORMAT).date()
    return date_parser.isoparse(text).date()


def format_age(age: timedelta) -> str:
    """Format an age as a short human readable string, e.g. '2h 5m'."""
    seconds = max(0, int(age.total_seconds()))
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if not parts:
        parts.append(f"{seconds}s")
    return " ".join(parts)
