"""Cache repository protocol for the persisted series."""

from datetime import datetime, timedelta
from typing import Protocol, Optional

from casechart.domain.models import CacheEntry, CacheInfo, CacheLoadResult, Series


class CacheRepository(Protocol):
    """Interface for reading and writing the single cached series."""

    def load(self, max_age: timedelta, now: Optional[datetime] = None) -> CacheLoadResult:
        """
        Read the cached series.

        FRESH if younger than max_age, STALE (series kept) otherwise,
        ABSENT if missing or unreadable. Never raises for bad cache content.
        """
        ...

    def store(self, series: Series, now: Optional[datetime] = None) -> Optional[CacheEntry]:
        """Atomically replace the cache; returns None if the write was skipped."""
        ...

    def info(self) -> Optional[CacheInfo]:
        """Describe the cache file, or None if there is no usable cache."""
        ...

    def clear(self) -> bool:
        """Delete the cache file; returns True if a file was removed."""
        ...
