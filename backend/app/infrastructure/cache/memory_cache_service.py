"""In-memory cache with per-entry TTL — memoizes repeated library searches."""

import time
from dataclasses import dataclass
from typing import Any

from app.application.interfaces.cache_service import CacheService

_DEFAULT_TTL_SECONDS = 3600


@dataclass
class _Entry:
    value: Any
    expires_at: float | None  # None = no expiry


class MemoryCacheService(CacheService):
    """Process-local cache; entries expire lazily on read."""

    def __init__(self, default_ttl_seconds: int = _DEFAULT_TTL_SECONDS):
        self._default_ttl = default_ttl_seconds
        self._entries: dict[str, _Entry] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and time.monotonic() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        expires_at = time.monotonic() + ttl if ttl > 0 else None
        self._entries[key] = _Entry(value=value, expires_at=expires_at)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def delete_by_prefix(self, prefix: str) -> None:
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]

    async def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict[str, Any]:
        """Size and keys, for debugging."""
        return {"size": len(self._entries), "keys": list(self._entries)}
