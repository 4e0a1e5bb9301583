"""Abstract interface (port) for short-lived key/value caching."""

from abc import ABC, abstractmethod
from typing import Any


class CacheService(ABC):
    """Port for an expiring cache — used to memoize repeated searches."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Store a value; ``ttl_seconds`` of 0 means no expiry."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def delete_by_prefix(self, prefix: str) -> None:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...
