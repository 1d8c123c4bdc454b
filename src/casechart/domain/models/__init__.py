"""Domain models package."""

from casechart.domain.models.enums import ZoomPreset, CacheStatus, DataOrigin
from casechart.domain.models.series import (
    DataPoint,
    Series,
    SeriesSlice,
    ROLLING_WINDOW_DAYS,
)
from casechart.domain.models.cache import CacheEntry, CacheLoadResult, CacheInfo
from casechart.domain.models.window import ViewWindow

__all__ = [
    "ZoomPreset",
    "CacheStatus",
    "DataOrigin",
    "DataPoint",
    "Series",
    "SeriesSlice",
    "ROLLING_WINDOW_DAYS",
    "CacheEntry",
    "CacheLoadResult",
    "CacheInfo",
    "ViewWindow",
]
