"""
Pytest configuration and fixtures for casechart tests.

This module provides:
- Factory helpers for series with consecutive dates
- File cache repository fixtures on a temporary directory
- Deterministic and failing series providers
- A scripted screen for driving the render loop
- Time helpers for UTC timestamps
"""

import os
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional

import pytest

from casechart.config.settings import Settings
from casechart.core.exceptions import AppError, NetworkError
from casechart.core.timezone import UTC_TZ
from casechart.domain.models import DataOrigin, Series
from casechart.repositories import FileCacheRepository
from casechart.services import DataService, LoadedSeries, ViewStateMachine
from casechart.ui.chart import ChartFrame
from casechart.ui.events import Event, KeyEvent


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 12,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in UTC."""
    return UTC_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2021, 3, 15, 12, 0, 0)


# =============================================================================
# SERIES FACTORIES
# =============================================================================


FIRST_DAY = date(2021, 3, 1)


def make_series(
    counts: Iterable[int],
    start: date = FIRST_DAY,
    rolling_window: int = 7,
) -> Series:
    """Build a series with one point per consecutive day starting at start."""
    return Series.build(
        [(start + timedelta(days=offset), cases) for offset, cases in enumerate(counts)],
        rolling_window=rolling_window,
    )


@pytest.fixture
def ten_point_series() -> Series:
    """Ten consecutive days with counts 1..10."""
    return make_series(range(1, 11))


@pytest.fixture
def long_series() -> Series:
    """One hundred consecutive days with a repeating weekly pattern."""
    return make_series([(day % 7) * 10 + day for day in range(100)])


# =============================================================================
# CACHE FIXTURES
# =============================================================================


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    """Cache file inside a directory that does not exist yet."""
    return tmp_path / "cache" / "cached_data.json"


@pytest.fixture
def file_cache_repo(cache_path: Path) -> FileCacheRepository:
    """Provide a FileCacheRepository on a temporary path."""
    return FileCacheRepository(cache_path, lock_timeout=0.5)


# =============================================================================
# PROVIDER FIXTURES
# =============================================================================


class DeterministicSeriesProvider:
    """
    Deterministic series provider for testing.

    Returns the same series on every call and counts the calls.
    """

    def __init__(self, series: Optional[Series] = None):
        self._series = series or make_series([5, 8, 13, 21, 34, 55, 89, 144, 233, 377])
        self.calls = 0

    @property
    def series(self) -> Series:
        return self._series

    def fetch(self) -> Series:
        self.calls += 1
        return self._series


class FailingSeriesProvider:
    """Series provider that always raises; NetworkError by default."""

    def __init__(self, error: Optional[AppError] = None):
        self._error = error or NetworkError("Network unavailable")
        self.calls = 0

    def fetch(self) -> Series:
        self.calls += 1
        raise self._error


@pytest.fixture
def deterministic_provider() -> DeterministicSeriesProvider:
    """Provide deterministic series provider."""
    return DeterministicSeriesProvider()


@pytest.fixture
def failing_provider() -> FailingSeriesProvider:
    """Provide a provider that always fails."""
    return FailingSeriesProvider()


@pytest.fixture
def data_service(
    deterministic_provider: DeterministicSeriesProvider,
    file_cache_repo: FileCacheRepository,
) -> DataService:
    """Provide DataService with deterministic provider and file cache."""
    return DataService(
        provider=deterministic_provider,
        cache_repo=file_cache_repo,
        max_age=timedelta(hours=1),
    )


# =============================================================================
# UI FIXTURES
# =============================================================================


class ScriptedScreen:
    """
    Screen replaying a fixed list of events.

    Records every drawn frame. Once the script is used up it answers
    with a quit key so a loop under test always terminates.
    """

    def __init__(self, events: Iterable[Optional[Event]] = ()):
        self._events = list(events)
        self.frames: list[ChartFrame] = []
        self.polls = 0
        self.exhausted = False

    def draw(self, frame: ChartFrame) -> None:
        self.frames.append(frame)

    def poll_event(self, timeout: float) -> Optional[Event]:
        self.polls += 1
        if self._events:
            return self._events.pop(0)
        self.exhausted = True
        return KeyEvent("q")


def keys(*names: str) -> list[KeyEvent]:
    """Key events for the given key names."""
    return [KeyEvent(name) for name in names]


def loaded_series(series: Series, fetched_at: Optional[datetime] = None) -> LoadedSeries:
    """Wrap a series as if it had just been downloaded."""
    return LoadedSeries(
        series=series,
        origin=DataOrigin.NETWORK,
        fetched_at=fetched_at or utc_datetime(2021, 3, 15),
    )


@pytest.fixture
def view(ten_point_series: Series) -> ViewStateMachine:
    """View state machine over ten points with a small zoom step."""
    return ViewStateMachine(ten_point_series, min_width=3, zoom_step=2)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Point the cache at a temporary directory and clear CASECHART_* variables.

    Also changes into the temporary directory so no stray .env is read.
    """
    for name in list(os.environ):
        if name.startswith("CASECHART_"):
            monkeypatch.delenv(name, raising=False)
    cache_dir = tmp_path / "cache"
    monkeypatch.setenv("CASECHART_CACHE_DIR", str(cache_dir))
    monkeypatch.chdir(tmp_path)
    return cache_dir


@pytest.fixture
def test_settings(isolated_env: Path) -> Settings:
    """Settings reading from the isolated environment."""
    return Settings()
