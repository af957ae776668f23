"""Abstract base class for the TTL cache entry store.

Defines the contract the cache coordinator relies on: a keyed store that
hands back :class:`CacheEntry` objects and hides entries whose expiry has
passed.  The store knows nothing about the upstream service.  The adapter
pattern allows the in-memory backend to be swapped (e.g. for Redis when the
proxy runs with more than one worker) without touching the coordinator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from nowplaying.models.cache import CacheEntry, CacheKey


class ICacheProvider(ABC):
    """Contract for the TTL cache entry store.

    All operations are async to allow for network-backed stores without
    blocking the event loop.  Each operation is atomic with respect to the
    others: a ``get`` never observes a partially written entry.
    """

    @abstractmethod
    async def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        CacheEntry or None
            The entry if present and ``now < expires_at``; ``None`` otherwise.
            Expired entries are dropped on read.
        """

    @abstractmethod
    async def put(self, key: CacheKey, value: Any, ttl: float) -> CacheEntry:
        """Store *value* under *key* for *ttl* seconds, replacing any entry.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The domain object to store.
        ttl:
            Time-to-live in seconds, measured from the moment of the call.

        Returns
        -------
        CacheEntry
            The entry as stored, including its absolute ``expires_at``.
        """

    @abstractmethod
    async def invalidate(self, key: CacheKey) -> None:
        """Remove the entry stored under *key*.

        This is a no-op if the key does not exist.
        """

    @abstractmethod
    async def keys(self) -> list[CacheKey]:
        """Return the keys that currently hold an unexpired entry."""
