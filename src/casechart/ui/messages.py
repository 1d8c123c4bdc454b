"""Localized labels for the chart."""

import os
from typing import Optional

from casechart.domain.models import DataOrigin, ViewWindow, ZoomPreset

_BUNDLES: dict[str, dict[str, str]] = {
    "en": {
        "cases": "{value:>6} new cases",
        "average": "{value:>8.1f} 7-day average",
        "incidence": "{value:>8.1f} incidence",
        "preset_full": "all data",
        "preset_minimal": "last {points} days",
        "preset_weeks": "last {weeks} week(s)",
        "preset_custom": "{points} days",
        "origin_cache": "cached {age} ago",
        "origin_network": "downloaded just now",
        "origin_stale_cache": "OUTDATED, cached {age} ago",
        "help": "↑/→ zoom in  ↓/← zoom out  Home all  End latest  1-9 weeks  q quit",
    },
    "de": {
        "cases": "{value:>6} neue Fälle",
        "average": "{value:>8.1f} 7-Tage-Mittel",
        "incidence": "{value:>8.1f} Inzidenz",
        "preset_full": "alle Daten",
        "preset_minimal": "letzte {points} Tage",
        "preset_weeks": "letzte {weeks} Woche(n)",
        "preset_custom": "{points} Tage",
        "origin_cache": "vor {age} zwischengespeichert",
        "origin_network": "gerade heruntergeladen",
        "origin_stale_cache": "VERALTET, vor {age} zwischengespeichert",
        "help": "↑/→ vergrößern  ↓/← verkleinern  Pos1 alles  Ende neueste  1-9 Wochen  q Ende",
    },
}


def user_language(environ: Optional[dict[str, str]] = None) -> str:
    """Pick 'de' or 'en' from the POSIX locale variables, defaulting to English."""
    env = os.environ if environ is None else environ
    for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = env.get(name)
        if value:
            lang = value[:2].lower()
            return lang if lang in _BUNDLES else "en"
    return "en"


class Messages:
    """Label bundle for one language."""

    def __init__(self, language: str = "en"):
        self._bundle = _BUNDLES.get(language, _BUNDLES["en"])

    @classmethod
    def user_default(cls) -> "Messages":
        return cls(user_language())

    def get(self, key: str, **values: object) -> str:
        return self._bundle[key].format(**values)

    def preset(self, window: ViewWindow) -> str:
        if window.preset == ZoomPreset.FULL:
            return self.get("preset_full")
        if window.preset == ZoomPreset.MINIMAL:
            return self.get("preset_minimal", points=window.width)
        if window.preset == ZoomPreset.WEEKS:
            return self.get("preset_weeks", weeks=window.weeks)
        return self.get("preset_custom", points=window.width)

    def origin(self, origin: DataOrigin, age: str) -> str:
        return self.get(f"origin_{origin.value.lower()}", age=age)
