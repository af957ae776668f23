"""In-memory cache provider using cachetools.TLRUCache.

Simple, fast store suitable for the single-process deployment the proxy
runs as.  Each entry carries its own absolute expiry, so ``TLRUCache`` is
used instead of ``TTLCache``: its time-to-use callback reads the expiry
straight off the stored :class:`CacheEntry`.  Expiry is lazy; an expired
entry is simply reported as missing on the next read.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

import structlog
from cachetools import TLRUCache

from nowplaying.interfaces.cache_provider import ICacheProvider
from nowplaying.models.cache import CacheEntry, CacheKey

logger = structlog.get_logger(logger_name=__name__)


def _entry_expiry(_key: CacheKey, entry: CacheEntry, _now: float) -> float:
    return entry.expires_at


class MemoryCacheProvider(ICacheProvider):
    """In-memory TTL store backed by ``cachetools.TLRUCache``.

    Parameters
    ----------
    max_size:
        Upper bound on stored entries.  The keyspace is a small fixed enum,
        so this is never reached in practice.
    clock:
        Monotonic time source in seconds.  Tests inject a manual clock.
    """

    def __init__(
        self,
        max_size: int = 32,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._cache: TLRUCache[CacheKey, CacheEntry] = TLRUCache(
            maxsize=max_size, ttu=_entry_expiry, timer=clock
        )
        # cachetools containers are not thread-safe on their own.
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry for *key*, or ``None`` if missing/expired."""
        with self._lock:
            entry = self._cache.get(key)
        if entry is not None:
            logger.debug("cache_hit", key=key.value, expires_at=entry.expires_at)
        else:
            logger.debug("cache_miss", key=key.value)
        return entry

    async def put(self, key: CacheKey, value: Any, ttl: float) -> CacheEntry:
        """Store *value* under *key*, expiring *ttl* seconds from now."""
        with self._lock:
            entry = CacheEntry(value=value, expires_at=self._clock() + ttl)
            self._cache[key] = entry
        logger.debug("cache_set", key=key.value, expires_at=entry.expires_at)
        return entry

    async def invalidate(self, key: CacheKey) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        with self._lock:
            self._cache.pop(key, None)
        logger.debug("cache_delete", key=key.value)

    async def keys(self) -> list[CacheKey]:
        """Return the keys holding an unexpired entry."""
        with self._lock:
            self._cache.expire()
            return list(self._cache)
