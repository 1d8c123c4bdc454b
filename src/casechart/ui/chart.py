"""Text rendering of the case chart."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from casechart.core.timezone import format_age, now_utc
from casechart.domain.models import DataOrigin, SeriesSlice, ViewWindow
from casechart.ui.messages import Messages

BAR_BLOCKS = " ▁▂▃▄▅▆▇█"
AVERAGE_MARK = "•"
Y_LABEL_WIDTH = 7
DATE_LABEL_WIDTH = 7
# header, legend, x axis, x labels, help
CHROME_ROWS = 5

BAR_COLOR = 33  # yellow
AVERAGE_COLOR = 36  # cyan
DIM_COLOR = 90


@dataclass(frozen=True)
class ChartFrame:
    """Everything needed to draw one screen of the chart."""

    visible: SeriesSlice
    window: ViewWindow
    total_points: int
    region: str
    origin: DataOrigin
    fetched_at: datetime
    incidence: Optional[float] = None


class ChartRenderer:
    """
    Renders a ChartFrame to a list of text lines of exactly the given width.

    Daily counts are drawn as bars with eighth-block resolution; the rolling
    average is overlaid as dots. When there are more points than columns,
    each column shows the maximum count and mean average of its points.
    """

    def __init__(self, messages: Messages, use_color: bool = True):
        self._messages = messages
        self._use_color = use_color

    def render(
        self,
        frame: ChartFrame,
        width: int,
        height: int,
        now: Optional[datetime] = None,
    ) -> list[str]:
        width = max(width, Y_LABEL_WIDTH + 2)
        rows = max(height - CHROME_ROWS, 1)
        plot_width = width - Y_LABEL_WIDTH - 1

        bars = _resample(frame.visible.counts, plot_width, max)
        averages = _resample(list(frame.visible.rolling), plot_width, _mean)
        top = max(max(bars, default=0), max(averages, default=0.0), 1)

        lines = [
            _fit(self._header(frame, now), width),
            _fit(self._legend(frame), width),
        ]
        for row in range(rows):
            lines.append(self._plot_row(row, rows, top, bars, averages, plot_width))
        lines.append(" " * Y_LABEL_WIDTH + "└" + "─" * plot_width)
        lines.append(_fit(" " * (Y_LABEL_WIDTH + 1) + _date_labels(frame.visible, plot_width), width))
        lines.append(self._color(_fit(self._messages.get("help"), width), DIM_COLOR))
        return lines

    def _header(self, frame: ChartFrame, now: Optional[datetime]) -> str:
        first = frame.visible.points[0].day
        last = frame.visible.points[-1].day
        age = format_age((now or now_utc()) - frame.fetched_at)
        return (
            f" {frame.region}  {first:%d.%m.%Y} - {last:%d.%m.%Y}"
            f"  [{self._messages.preset(frame.window)}, {len(frame.visible)}/{frame.total_points}]"
            f"  ({self._messages.origin(frame.origin, age)})"
        )

    def _legend(self, frame: ChartFrame) -> str:
        parts = [
            self._messages.get("cases", value=frame.visible.points[-1].cases),
            self._messages.get("average", value=frame.visible.rolling[-1]),
        ]
        if frame.incidence is not None:
            parts.append(self._messages.get("incidence", value=frame.incidence))
        return "   ".join(parts)

    def _plot_row(
        self,
        row: int,
        rows: int,
        top: float,
        bars: Sequence[float],
        averages: Sequence[float],
        plot_width: int,
    ) -> str:
        # row 0 is the top of the plot
        level_floor = (rows - 1 - row) * 8
        label = ""
        if row == 0:
            label = _format_count(top)
        elif row == rows - 1:
            label = "0"
        elif row == rows // 2:
            label = _format_count(top * (rows - row) / rows)

        cells = []
        for column in range(plot_width):
            average_row = rows - 1 - min(int(averages[column] / top * rows), rows - 1)
            if averages[column] > 0 and average_row == row:
                cells.append(self._color(AVERAGE_MARK, AVERAGE_COLOR))
                continue
            eighths = int(round(bars[column] / top * rows * 8)) - level_floor
            block = BAR_BLOCKS[min(max(eighths, 0), 8)]
            cells.append(self._color(block, BAR_COLOR) if block != " " else block)

        return f"{label:>{Y_LABEL_WIDTH}}│" + "".join(cells)

    def _color(self, text: str, code: int) -> str:
        if not self._use_color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"


def _resample(values: list, columns: int, reduce: Callable[[list], float]) -> list:
    """Map values onto exactly `columns` buckets, repeating values when there are fewer."""
    if len(values) <= columns:
        return [values[column * len(values) // columns] for column in range(columns)]
    result = []
    for column in range(columns):
        lo = column * len(values) // columns
        hi = max((column + 1) * len(values) // columns, lo + 1)
        result.append(reduce(values[lo:hi]))
    return result


def _mean(values: list) -> float:
    return sum(values) / len(values)


def _date_labels(visible: SeriesSlice, plot_width: int) -> str:
    """Day.month labels under the first column of their point, left to right without overlap."""
    text = [" "] * plot_width
    count = len(visible)
    next_free = 0
    for index, point in enumerate(visible.points):
        column = -(-index * plot_width // count)
        if column < next_free:
            continue
        label = f"{point.day:%d.%m}"
        if column + len(label) > plot_width:
            break
        text[column:column + len(label)] = label
        next_free = column + DATE_LABEL_WIDTH
    return "".join(text)


def _format_count(value: float) -> str:
    if value >= 10_000:
        return f"{value / 1000:.0f}k"
    return f"{value:.0f}"


def _fit(text: str, width: int) -> str:
    """Pad or cut plain text to exactly width characters."""
    if len(text) > width:
        return text[:width]
    return text.ljust(width)
