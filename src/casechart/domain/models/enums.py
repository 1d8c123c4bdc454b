"""Enumerations for domain models."""

from enum import Enum


class ZoomPreset(str, Enum):
    """Named rules used to recompute the visible window."""

    FULL = "FULL"
    MINIMAL = "MINIMAL"
    WEEKS = "WEEKS"  # last n*7 points, n kept on the window
    CUSTOM = "CUSTOM"  # result of stepwise zooming


class CacheStatus(str, Enum):
    """Outcome of reading the cache file."""

    FRESH = "FRESH"
    STALE = "STALE"
    ABSENT = "ABSENT"


class DataOrigin(str, Enum):
    """Where the series shown in the chart came from."""

    CACHE = "CACHE"
    NETWORK = "NETWORK"
    STALE_CACHE = "STALE_CACHE"
