"""Application settings and configuration."""

import os
import sys
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "casechart"
CACHE_FILE_NAME = "cached_data.json"

# ArcGIS feature service of the city of Dresden, all features as JSON
DEFAULT_SOURCE_URL = (
    "https://services.arcgis.com/ORpvigFPJUhb8RDF/arcgis/rest/services/"
    "corona_DD_7_Sicht/FeatureServer/0/query?f=json&where=ObjectId%3E=0&outFields=*"
)

# Main residents of Dresden, used for the 7-day incidence
DEFAULT_POPULATION = 556_780


def get_default_cache_dir() -> Path:
    """Return the default cache directory based on platform."""
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Local"
        return root / APP_NAME / "Cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_NAME
    xdg = os.environ.get("XDG_CACHE_HOME")
    root = Path(xdg) if xdg else Path.home() / ".cache"
    return root / APP_NAME


class Settings(BaseSettings):
    """Application configuration loaded from CASECHART_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CASECHART_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = APP_NAME
    region_name: str = "Dresden"

    # Cache directory (platform cache dir if not set)
    cache_dir: Optional[Path] = None
    stale_after_seconds: float = Field(default=3600.0, ge=0)
    lock_timeout_seconds: float = Field(default=2.0, ge=0)

    # Remote source
    source_url: str = DEFAULT_SOURCE_URL
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    date_field: str = "Datum"
    count_field: str = "Fälle_Meldedatum"
    csv_delimiter: str = ";"
    population: Optional[int] = Field(default=DEFAULT_POPULATION, gt=0)

    # Use an outdated cache when the download fails
    stale_fallback: bool = True

    # Chart behavior
    min_window_points: int = Field(default=7, ge=1)
    zoom_step_points: int = Field(default=14, ge=1)
    rolling_window_days: int = Field(default=7, ge=1)
    poll_timeout_seconds: float = Field(default=0.25, gt=0)

    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    def get_cache_dir(self) -> Path:
        """Get the cache directory (not created here; the cache store does that on write)."""
        return self.cache_dir or get_default_cache_dir()

    def get_cache_file(self) -> Path:
        """Get the path of the single cache file."""
        return self.get_cache_dir() / CACHE_FILE_NAME
