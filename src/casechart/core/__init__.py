"""Core utilities and shared functionality."""

from casechart.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    parse_source_date,
    format_age,
    UTC_TZ,
)
from casechart.core.durations import parse_duration
from casechart.core.exceptions import (
    AppError,
    EmptyDatasetError,
    UnsortedOrDuplicateDatesError,
    NetworkError,
    MalformedResponseError,
    CacheUnavailableError,
    TerminalError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "parse_source_date",
    "format_age",
    "UTC_TZ",
    "parse_duration",
    "AppError",
    "EmptyDatasetError",
    "UnsortedOrDuplicateDatesError",
    "NetworkError",
    "MalformedResponseError",
    "CacheUnavailableError",
    "TerminalError",
]
