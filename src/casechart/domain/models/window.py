"""Visible window over a series."""

from dataclasses import dataclass
from typing import Optional

from casechart.domain.models.enums import ZoomPreset


@dataclass(frozen=True)
class ViewWindow:
    """
    Half-open index range [start, end) into the current series.

    IMPORTANT: Never construct by hand outside the view state machine;
    windows are always recomputed from a preset and clamped.
    """

    start: int
    end: int
    preset: ZoomPreset
    weeks: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.preset, str):
            object.__setattr__(self, "preset", ZoomPreset(self.preset))

    @property
    def width(self) -> int:
        return self.end - self.start
