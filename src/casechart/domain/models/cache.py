"""Cache models for the persisted series."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from casechart.domain.models.enums import CacheStatus
from casechart.domain.models.series import Series


@dataclass(frozen=True)
class CacheEntry:
    """
    Series as persisted on disk, with the time it was fetched.

    IMPORTANT: Only written after a successful fetch; never patched in place.
    """

    series: Series
    created_at: datetime


@dataclass(frozen=True)
class CacheLoadResult:
    """Result of a cache read: a fresh entry, a stale entry, or nothing."""

    status: CacheStatus
    entry: Optional[CacheEntry] = None

    @classmethod
    def absent(cls) -> "CacheLoadResult":
        return cls(status=CacheStatus.ABSENT)

    @property
    def series(self) -> Optional[Series]:
        return self.entry.series if self.entry else None

    @property
    def is_fresh(self) -> bool:
        return self.status == CacheStatus.FRESH


@dataclass(frozen=True)
class CacheInfo:
    """Summary of the cache file for `cache list`."""

    path: Path
    created_at: datetime
    point_count: int
