"""Domain layer - pure models with no I/O."""

from casechart.domain.models import (
    ZoomPreset,
    CacheStatus,
    DataOrigin,
    DataPoint,
    Series,
    SeriesSlice,
    CacheEntry,
    CacheLoadResult,
    CacheInfo,
    ViewWindow,
)

__all__ = [
    "ZoomPreset",
    "CacheStatus",
    "DataOrigin",
    "DataPoint",
    "Series",
    "SeriesSlice",
    "CacheEntry",
    "CacheLoadResult",
    "CacheInfo",
    "ViewWindow",
]
