"""Series and DataPoint domain models."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Union

from casechart.core.exceptions import EmptyDatasetError, UnsortedOrDuplicateDatesError

ROLLING_WINDOW_DAYS = 7
INCIDENCE_BASE = 100_000


@dataclass(frozen=True)
class DataPoint:
    """New cases reported for one calendar day."""

    day: date
    cases: int

    def __post_init__(self) -> None:
        if isinstance(self.cases, bool) or not isinstance(self.cases, int):
            raise ValueError(f"case count must be an integer, got {self.cases!r}")
        if self.cases < 0:
            raise ValueError(f"case count must not be negative, got {self.cases}")


@dataclass(frozen=True)
class SeriesSlice:
    """Visible part of a series with its aligned rolling average."""

    start: int
    end: int
    points: tuple[DataPoint, ...]
    rolling: tuple[float, ...]

    @property
    def dates(self) -> list[date]:
        return [p.day for p in self.points]

    @property
    def counts(self) -> list[int]:
        return [p.cases for p in self.points]

    def __len__(self) -> int:
        return len(self.points)


class Series:
    """
    Full history of daily case counts for one region.

    Points are kept in ascending date order with unique dates. The rolling
    7-day sums are computed once at construction and memoized per window
    size; a series is never mutated after it has been built.
    """

    def __init__(
        self,
        points: Iterable[Union[DataPoint, tuple[date, int]]],
        rolling_window: int = ROLLING_WINDOW_DAYS,
    ):
        normalized = [p if isinstance(p, DataPoint) else DataPoint(*p) for p in points]
        if not normalized:
            raise EmptyDatasetError()

        normalized.sort(key=lambda p: p.day)
        for previous, current in zip(normalized, normalized[1:]):
            if previous.day >= current.day:
                raise UnsortedOrDuplicateDatesError(current.day.isoformat())

        self._points: tuple[DataPoint, ...] = tuple(normalized)
        self._rolling_window = rolling_window
        self._rolling_sums: dict[int, tuple[int, ...]] = {}
        self.rolling_sums(rolling_window)

    @classmethod
    def build(
        cls,
        points: Iterable[Union[DataPoint, tuple[date, int]]],
        rolling_window: int = ROLLING_WINDOW_DAYS,
    ) -> "Series":
        """
        Build a series from raw points.

        Raises EmptyDatasetError for zero points and
        UnsortedOrDuplicateDatesError when two points share a date.
        """
        return cls(points, rolling_window=rolling_window)

    @property
    def points(self) -> tuple[DataPoint, ...]:
        return self._points

    @property
    def dates(self) -> list[date]:
        return [p.day for p in self._points]

    @property
    def counts(self) -> list[int]:
        return [p.cases for p in self._points]

    @property
    def first(self) -> DataPoint:
        return self._points[0]

    @property
    def latest(self) -> DataPoint:
        return self._points[-1]

    @property
    def rolling(self) -> tuple[int, ...]:
        """Rolling sums for the window size the series was built with."""
        return self.rolling_sums(self._rolling_window)

    def rolling_sums(self, window_size: int = ROLLING_WINDOW_DAYS) -> tuple[int, ...]:
        """Sum of the current and up to window_size - 1 preceding counts, per point."""
        if window_size < 1:
            raise ValueError(f"window size must be positive, got {window_size}")

        cached = self._rolling_sums.get(window_size)
        if cached is not None:
            return cached

        sums = []
        total = 0
        for index, point in enumerate(self._points):
            total += point.cases
            if index >= window_size:
                total -= self._points[index - window_size].cases
            sums.append(total)

        cached = tuple(sums)
        self._rolling_sums[window_size] = cached
        return cached

    def rolling_average(self, window_size: int = ROLLING_WINDOW_DAYS) -> tuple[float, ...]:
        """Rolling mean; the first points average over what is available."""
        sums = self.rolling_sums(window_size)
        return tuple(total / min(index + 1, window_size) for index, total in enumerate(sums))

    def incidence(self, population: int) -> tuple[float, ...]:
        """7-day incidence per 100,000 inhabitants, aligned with the points."""
        if population <= 0:
            raise ValueError(f"population must be positive, got {population}")
        return tuple(
            total * INCIDENCE_BASE / population
            for total in self.rolling_sums(ROLLING_WINDOW_DAYS)
        )

    def slice(self, start: int, end: int) -> SeriesSlice:
        """Return points[start:end] with the aligned rolling average."""
        rolling = self.rolling_average(self._rolling_window)
        return SeriesSlice(
            start=start,
            end=end,
            points=self._points[start:end],
            rolling=rolling[start:end],
        )

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[DataPoint]:
        return iter(self._points)

    def __getitem__(self, index: int) -> DataPoint:
        return self._points[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Series):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        return (
            f"Series({len(self._points)} points, "
            f"{self.first.day.isoformat()}..{self.latest.day.isoformat()})"
        )
