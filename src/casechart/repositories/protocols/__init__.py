"""Repository protocol definitions (interfaces)."""

from casechart.repositories.protocols.cache_repo import CacheRepository

__all__ = [
    "CacheRepository",
]
