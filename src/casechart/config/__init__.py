"""Configuration: settings and logging."""

from casechart.config.settings import Settings, get_default_cache_dir
from casechart.config.logging_config import setup_logging, adjust_level

__all__ = [
    "Settings",
    "get_default_cache_dir",
    "setup_logging",
    "adjust_level",
]
