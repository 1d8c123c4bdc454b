"""Logging configuration."""

import logging
import sys

from casechart.config.settings import Settings

_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


def adjust_level(level: str, verbosity: int) -> str:
    """Move a level name up (verbosity > 0) or down (< 0) the level ladder."""
    name = level.upper()
    index = _LEVELS.index(name) if name in _LEVELS else _LEVELS.index("WARNING")
    index = min(max(index + verbosity, 0), len(_LEVELS) - 1)
    return _LEVELS[index]


def setup_logging(settings: Settings) -> None:
    """Configure application logging."""
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    else:
        # stdout belongs to the chart
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=getattr(logging, adjust_level(settings.log_level, 0)),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[handler],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
