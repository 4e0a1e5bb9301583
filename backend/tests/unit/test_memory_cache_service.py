"""Unit tests for the in-memory TTL cache."""

from types import SimpleNamespace

import pytest

from app.infrastructure.cache import MemoryCacheService
from app.infrastructure.cache import memory_cache_service


@pytest.mark.asyncio
async def test_set_and_get():
    cache = MemoryCacheService()

    await cache.set("k", [1, 2, 3])

    assert await cache.get("k") == [1, 2, 3]
    assert await cache.get("missing") is None


@pytest.mark.asyncio
async def test_entries_expire_after_ttl(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(memory_cache_service, "time", SimpleNamespace(monotonic=lambda: now[0]))
    cache = MemoryCacheService(default_ttl_seconds=300)

    await cache.set("k", "v")
    now[0] += 299
    assert await cache.get("k") == "v"

    now[0] += 2
    assert await cache.get("k") is None
    assert cache.stats()["size"] == 0


@pytest.mark.asyncio
async def test_zero_ttl_never_expires(monkeypatch):
    now = [0.0]
    monkeypatch.setattr(memory_cache_service, "time", SimpleNamespace(monotonic=lambda: now[0]))
    cache = MemoryCacheService()

    await cache.set("k", "v", ttl_seconds=0)
    now[0] += 10**9

    assert await cache.get("k") == "v"


@pytest.mark.asyncio
async def test_delete_by_prefix():
    cache = MemoryCacheService()
    await cache.set("rag:search:a", 1)
    await cache.set("rag:search:b", 2)
    await cache.set("other", 3)

    await cache.delete_by_prefix("rag:search:")

    assert cache.stats() == {"size": 1, "keys": ["other"]}


@pytest.mark.asyncio
async def test_delete_and_clear():
    cache = MemoryCacheService()
    await cache.set("a", 1)
    await cache.set("b", 2)

    await cache.delete("a")
    assert await cache.get("a") is None

    await cache.clear()
    assert cache.stats()["size"] == 0
