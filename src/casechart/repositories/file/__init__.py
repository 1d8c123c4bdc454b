"""File-backed repository implementations."""

from casechart.repositories.file.cache_repo import FileCacheRepository
from casechart.repositories.file.file_lock import LockTimeout, file_lock

__all__ = [
    "FileCacheRepository",
    "LockTimeout",
    "file_lock",
]
