"""Data service combining the cache and the remote provider."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from casechart.core.exceptions import (
    CacheUnavailableError,
    MalformedResponseError,
    NetworkError,
)
from casechart.core.timezone import now_utc
from casechart.domain.models import CacheInfo, CacheLoadResult, CacheStatus, DataOrigin, Series
from casechart.providers.series_provider import SeriesProvider
from casechart.repositories.protocols import CacheRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedSeries:
    """Series handed to the chart, with where and when it was obtained."""

    series: Series
    origin: DataOrigin
    fetched_at: datetime


class DataService:
    """
    Service for obtaining the series to display.

    Tries the cache first and downloads when it is stale or absent. On a
    failed download an outdated cache is used instead, if the stale_fallback
    policy allows it. Fetching and storing stay separate steps, so the cache
    lock is never held while the network call is in flight.
    """

    def __init__(
        self,
        provider: SeriesProvider,
        cache_repo: CacheRepository,
        max_age: timedelta = timedelta(hours=1),
        stale_fallback: bool = True,
    ):
        self._provider = provider
        self._cache = cache_repo
        self._max_age = max_age
        self._stale_fallback = stale_fallback

    def load_series(self, force: bool = False, offline: bool = False) -> LoadedSeries:
        """
        Return the best available series.

        force skips the cache read and always downloads; offline never
        downloads and raises CacheUnavailableError if nothing is cached.
        """
        if force:
            logger.debug("Ignoring cache since a download was forced")
            return self.refresh()

        cached = self._cache.load(self._max_age)
        logger.debug("Found data in cache: %s", cached.status.value)

        if cached.is_fresh:
            logger.debug("Using data from cache from %s", cached.entry.created_at)
            return LoadedSeries(cached.series, DataOrigin.CACHE, cached.entry.created_at)

        if offline:
            if cached.status == CacheStatus.STALE:
                logger.info("Offline mode: using cached data from %s", cached.entry.created_at)
                return LoadedSeries(cached.series, DataOrigin.STALE_CACHE, cached.entry.created_at)
            raise CacheUnavailableError(
                "Offline mode was requested, but there is no cached data available",
                hint="Run `casechart cache refresh` to download the data first.",
            )

        logger.debug("Calling data source for new data")
        try:
            return self._fetch_and_store()
        except (NetworkError, MalformedResponseError) as exc:
            return self._fall_back(cached, exc)

    def refresh(self) -> LoadedSeries:
        """Download the series regardless of the cache age and store it."""
        return self._fetch_and_store()

    def _fetch_and_store(self) -> LoadedSeries:
        series = self._provider.fetch()
        entry = self._cache.store(series)
        fetched_at = entry.created_at if entry else now_utc()
        return LoadedSeries(series, DataOrigin.NETWORK, fetched_at)

    def _fall_back(self, cached: CacheLoadResult, error: Exception) -> LoadedSeries:
        if cached.status != CacheStatus.STALE:
            raise error
        if not self._stale_fallback:
            logger.debug("Stale cache available but fallback is disabled")
            raise error

        logger.warning(
            "Could not fetch new data (%s); showing cached data from %s",
            error,
            cached.entry.created_at,
        )
        return LoadedSeries(cached.series, DataOrigin.STALE_CACHE, cached.entry.created_at)

    def cache_info(self) -> Optional[CacheInfo]:
        """Describe the cache file, or None."""
        return self._cache.info()

    def clear_cache(self) -> bool:
        """Delete the cache file."""
        return self._cache.clear()
