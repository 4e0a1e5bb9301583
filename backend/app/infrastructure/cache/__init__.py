"""In-process cache infrastructure package."""

from .memory_cache_service import MemoryCacheService

__all__ = ["MemoryCacheService"]
