"""Application context wiring settings into services.

Built once in `main` and passed down; components get their collaborators
through constructors instead of module-level state.
"""

from datetime import timedelta
from typing import Optional

from casechart.config.settings import Settings
from casechart.providers import HttpSeriesProvider, SeriesProvider
from casechart.repositories import CacheRepository, FileCacheRepository
from casechart.services import DataService, LoadedSeries, ViewStateMachine
from casechart.ui import ChartRenderer, Messages, RenderLoop, Screen


class AppContext:
    """
    Application context providing access to all services.

    Services are created lazily on first access and kept for the
    lifetime of the context.
    """

    def __init__(
        self,
        settings: Settings,
        provider: Optional[SeriesProvider] = None,
        cache_repo: Optional[CacheRepository] = None,
    ):
        """
        Initialize application context.

        Args:
            settings: Effective settings (environment plus CLI overrides).
            provider: Optional provider replacing the HTTP provider.
            cache_repo: Optional cache repository replacing the file cache.
        """
        self._settings = settings
        self._provider = provider
        self._cache_repo = cache_repo
        self._data_service: Optional[DataService] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def provider(self) -> SeriesProvider:
        """Get the series provider."""
        if self._provider is None:
            self._provider = HttpSeriesProvider(
                url=self._settings.source_url,
                date_field=self._settings.date_field,
                count_field=self._settings.count_field,
                timeout=self._settings.request_timeout_seconds,
                csv_delimiter=self._settings.csv_delimiter,
                rolling_window=self._settings.rolling_window_days,
            )
        return self._provider

    @property
    def cache_repo(self) -> CacheRepository:
        """Get the cache repository."""
        if self._cache_repo is None:
            self._cache_repo = FileCacheRepository(
                path=self._settings.get_cache_file(),
                lock_timeout=self._settings.lock_timeout_seconds,
                rolling_window=self._settings.rolling_window_days,
            )
        return self._cache_repo

    @property
    def data(self) -> DataService:
        """Get the DataService instance."""
        if self._data_service is None:
            self._data_service = DataService(
                provider=self.provider,
                cache_repo=self.cache_repo,
                max_age=timedelta(seconds=self._settings.stale_after_seconds),
                stale_fallback=self._settings.stale_fallback,
            )
        return self._data_service

    def renderer(self, use_color: bool = True) -> ChartRenderer:
        """Create a chart renderer with the user's language."""
        return ChartRenderer(Messages.user_default(), use_color=use_color)

    def render_loop(self, loaded: LoadedSeries, screen: Screen) -> RenderLoop:
        """Create the render loop for a loaded series."""
        view = ViewStateMachine(
            loaded.series,
            min_width=self._settings.min_window_points,
            zoom_step=self._settings.zoom_step_points,
        )
        return RenderLoop(
            view=view,
            screen=screen,
            loaded=loaded,
            region_name=self._settings.region_name,
            population=self._settings.population,
            poll_timeout=self._settings.poll_timeout_seconds,
        )
