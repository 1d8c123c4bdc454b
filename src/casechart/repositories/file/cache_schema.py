"""Pydantic schemas for the on-disk cache document."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from casechart.core.timezone import to_utc
from casechart.domain.models import CacheEntry, DataPoint, Series


class CachedPoint(BaseModel):
    """One (date, cases) record."""

    model_config = ConfigDict(extra="forbid")

    date: dt.date
    cases: int = Field(ge=0)


class CachedData(BaseModel):
    """Cache file layout: fetch timestamp header followed by the points."""

    created_at: dt.datetime
    points: list[CachedPoint] = Field(min_length=1)

    @classmethod
    def from_entry(cls, entry: CacheEntry) -> "CachedData":
        return cls(
            created_at=entry.created_at,
            points=[CachedPoint(date=p.day, cases=p.cases) for p in entry.series],
        )

    def to_entry(self, rolling_window: int) -> CacheEntry:
        """Convert to a domain entry; raises if the points do not form a valid series."""
        series = Series.build(
            (DataPoint(p.date, p.cases) for p in self.points),
            rolling_window=rolling_window,
        )
        return CacheEntry(series=series, created_at=to_utc(self.created_at))
