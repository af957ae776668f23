"""Cache providers.

MemoryCacheProvider wraps a cachetools TLRUCache; fast but not shared across
processes. For multi-worker deployments, swap in a Redis adapter
implementing ICacheProvider without changing the coordinator.
"""

from nowplaying.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
