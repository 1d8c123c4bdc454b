"""File-backed implementation of CacheRepository."""

import contextlib
import logging
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from casechart.core.exceptions import AppError
from casechart.core.timezone import now_utc, to_utc
from casechart.domain.models import (
    CacheEntry,
    CacheInfo,
    CacheLoadResult,
    CacheStatus,
    Series,
    ROLLING_WINDOW_DAYS,
)
from casechart.repositories.file.cache_schema import CachedData
from casechart.repositories.file.file_lock import LockTimeout, file_lock

logger = logging.getLogger(__name__)


class FileCacheRepository:
    """
    JSON cache file guarded by an inter-process lock.

    Readers hold a shared lock and writers an exclusive lock on `<path>.lock`,
    each only for one read or one write. Writes go to a temporary file in the
    same directory that is renamed over the cache, so a reader sees either the
    previous or the new document, never a partial one.
    """

    def __init__(
        self,
        path: Path,
        lock_timeout: float = 2.0,
        rolling_window: int = ROLLING_WINDOW_DAYS,
    ):
        self._path = Path(path)
        self._lock_path = self._path.with_name(self._path.name + ".lock")
        self._lock_timeout = lock_timeout
        self._rolling_window = rolling_window

    @property
    def path(self) -> Path:
        return self._path

    def load(self, max_age: timedelta, now: Optional[datetime] = None) -> CacheLoadResult:
        """Read the cache and classify it as FRESH, STALE or ABSENT."""
        entry = self._read_entry()
        if entry is None:
            return CacheLoadResult.absent()

        age = to_utc(now or now_utc()) - entry.created_at
        status = CacheStatus.FRESH if age < max_age else CacheStatus.STALE
        logger.debug(
            "Cached data: created=%s age=%s max_age=%s status=%s",
            entry.created_at.isoformat(),
            age,
            max_age,
            status.value,
        )
        return CacheLoadResult(status=status, entry=entry)

    def store(self, series: Series, now: Optional[datetime] = None) -> Optional[CacheEntry]:
        """Replace the cache with series, stamped with the current time."""
        entry = CacheEntry(series=series, created_at=to_utc(now or now_utc()))
        payload = CachedData.from_entry(entry).model_dump_json(indent=2)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with file_lock(self._lock_path, shared=False, timeout=self._lock_timeout):
                self._replace_atomically(payload)
        except LockTimeout:
            logger.warning(
                "Did not write the cached data to [%s] as another process was accessing that file.",
                self._path,
            )
            return None
        except PermissionError:
            logger.warning(
                "Could not get permission to write the cached data to [%s]. "
                "Please make sure that your current user can write [%s].",
                self._path,
                self._path.parent,
            )
            return None
        except OSError as exc:
            logger.warning("Could not write the cached data to [%s]. Error: [%s].", self._path, exc)
            return None

        logger.info("Stored %d data points in cache [%s]", len(series), self._path)
        return entry

    def info(self) -> Optional[CacheInfo]:
        """Describe the cache file, or None if there is no usable cache."""
        entry = self._read_entry()
        if entry is None:
            return None
        return CacheInfo(path=self._path, created_at=entry.created_at, point_count=len(entry.series))

    def clear(self) -> bool:
        """Delete the cache file; a missing file is not an error."""
        try:
            with file_lock(self._lock_path, shared=False, timeout=self._lock_timeout):
                self._path.unlink()
        except FileNotFoundError:
            # already gone or never existed
            return False
        except LockTimeout:
            logger.warning(
                "Did not delete the cached data at [%s] as another process was accessing that file.",
                self._path,
            )
            return False
        except OSError as exc:
            logger.warning("Could not delete the cached data at [%s]. Error: [%s].", self._path, exc)
            return False
        logger.info("Removed cache file [%s]", self._path)
        return True

    def _read_entry(self) -> Optional[CacheEntry]:
        if not self._path.exists():
            logger.debug("No cache file at [%s]", self._path)
            return None

        try:
            with file_lock(self._lock_path, shared=True, timeout=self._lock_timeout):
                raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except LockTimeout:
            logger.warning(
                "Did not read the cached data at [%s] as another process was accessing that file.",
                self._path,
            )
            return None
        except PermissionError:
            logger.warning(
                "Could not get permission to read the cached data at [%s]. "
                "Please make sure that your current user can read [%s].",
                self._path,
                self._path,
            )
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read the cached data at [%s]. Error: [%s].", self._path, exc)
            return None

        try:
            return CachedData.model_validate_json(raw).to_entry(self._rolling_window)
        except (ValidationError, AppError, ValueError) as exc:
            logger.warning("Could not parse the cached data at [%s]. Error: [%s].", self._path, exc)
            return None

    def _replace_atomically(self, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
