"""Repository layer - data access abstractions and implementations."""

from casechart.repositories.protocols import CacheRepository
from casechart.repositories.file import FileCacheRepository

__all__ = [
    "CacheRepository",
    "FileCacheRepository",
]
