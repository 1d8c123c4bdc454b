"""Case data providers module."""

from casechart.providers.series_provider import SeriesProvider
from casechart.providers.http_provider import HttpSeriesProvider

__all__ = [
    "SeriesProvider",
    "HttpSeriesProvider",
]
