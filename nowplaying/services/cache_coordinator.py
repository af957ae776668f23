"""Get-or-fetch coordinator with per-key request coalescing.

Sits between the route handlers and the streaming provider.  A read either
returns a fresh cached value or joins the single upstream fetch that is
already running for that key; it never starts a second one.

# ─── HOW COALESCING WORKS ──────────────────────────────────────────────
#
#   reader A ─┐                       ┌─ put(key, value, ttl)
#   reader B ─┼─→ miss ─→ in-flight ──┤
#   reader C ─┘    (one Task per key) └─ marker removed, A/B/C released
#
#   1. Store hit (now < expires_at)  → return the value, no await on I/O.
#   2. Miss, marker present          → await the existing Task.
#   3. Miss, no marker               → create the Task, register it, await it.
#
# The Task *is* the in-flight marker.  Every reader awaits it through
# asyncio.shield(), so a reader whose HTTP client disconnects is cancelled
# alone; the fetch keeps running and still fills the cache for the others.
#
# Failures are not cached.  The Task raises, every waiter re-raises the
# same exception, and the marker is gone so the next read retries.
#
# invalidate() bumps a per-key generation and detaches any in-flight Task.
# A detached fetch still answers the readers already waiting on it, but
# its result is not written to the store: it may describe the player
# state from before the command that caused the invalidation.
#
# The detached Task is kept as the key's predecessor.  The next fetch for
# that key waits for it to settle before calling upstream, so at most one
# upstream call per key is ever outstanding, and the new call still starts
# after the command that caused the invalidation.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

from nowplaying.interfaces.cache_provider import ICacheProvider
from nowplaying.models.cache import CacheKey
from nowplaying.utils.logging import get_logger

_T = TypeVar("_T")

CACHE_TTL_SECONDS = 10.0

FetchFn = Callable[[], Awaitable[_T]]


class CacheCoordinator:
    """Coalescing, TTL-bounded front for upstream reads.

    Parameters
    ----------
    store:
        The entry store.  Shared with nothing else; the coordinator is the
        only writer.
    ttl:
        Lifetime of a freshly fetched entry, in seconds.
    """

    def __init__(self, store: ICacheProvider, ttl: float = CACHE_TTL_SECONDS) -> None:
        self._store = store
        self._ttl = ttl
        self._in_flight: dict[CacheKey, asyncio.Task[Any]] = {}
        self._generations: dict[CacheKey, int] = {}
        self._superseded: dict[CacheKey, asyncio.Task[Any]] = {}
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def store(self) -> ICacheProvider:
        return self._store

    def in_flight_keys(self) -> list[CacheKey]:
        """Return the keys with an upstream fetch currently outstanding."""
        return list(self._in_flight)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_or_fetch(self, key: CacheKey, fetch_fn: FetchFn[_T]) -> _T:
        """Return the cached value for *key*, fetching it at most once per miss.

        Parameters
        ----------
        key:
            Which resource to read.
        fetch_fn:
            Zero-argument coroutine function performing the upstream call.
            Only invoked when no fresh entry and no in-flight fetch exist.

        Returns
        -------
        The cached or freshly fetched value.

        Raises
        ------
        Exception
            Whatever *fetch_fn* raised, re-raised to every coalesced caller.
        """
        entry = await self._store.get(key)
        if entry is not None:
            return entry.value

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(
                self._populate(
                    key,
                    fetch_fn,
                    self._generations.get(key, 0),
                    self._superseded.get(key),
                ),
                name=f"cache-fetch:{key.value}",
            )
            task.add_done_callback(self._log_fetch_outcome)
            self._in_flight[key] = task
            self._logger.info("upstream_fetch_started", key=key.value)
        else:
            self._logger.debug("fetch_coalesced", key=key.value)

        return await asyncio.shield(task)

    async def invalidate(self, key: CacheKey) -> None:
        """Drop the entry for *key* so the next read goes upstream.

        Any fetch already in flight for *key* is detached: its waiters still
        receive its result, but the detached result is never stored.  The
        next fetch for *key* starts upstream only once the detached one has
        settled.
        """
        self._generations[key] = self._generations.get(key, 0) + 1
        detached = self._in_flight.pop(key, None)
        if detached is not None:
            self._superseded[key] = detached
        await self._store.invalidate(key)
        self._logger.info(
            "cache_invalidated",
            key=key.value,
            detached_fetch=detached is not None,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _populate(
        self,
        key: CacheKey,
        fetch_fn: FetchFn[_T],
        generation: int,
        predecessor: asyncio.Task[Any] | None,
    ) -> _T:
        # generation is captured when the Task is created, not when it first
        # runs, so an invalidate() in between still detaches this fetch.
        try:
            if predecessor is not None and not predecessor.done():
                self._logger.debug("fetch_waiting_on_detached", key=key.value)
                # wait() never raises the predecessor's exception; its own
                # waiters and _log_fetch_outcome already handle that.
                await asyncio.wait({predecessor})
            value = await fetch_fn()
            if self._generations.get(key, 0) == generation:
                await self._store.put(key, value, self._ttl)
            else:
                self._logger.info("fetch_result_discarded", key=key.value)
            return value
        finally:
            current = asyncio.current_task()
            # Only clear the marker if it is still ours; invalidate() may
            # have detached it and a newer fetch may have taken the slot.
            if self._in_flight.get(key) is current:
                del self._in_flight[key]
            if self._superseded.get(key) is current:
                del self._superseded[key]

    def _log_fetch_outcome(self, task: asyncio.Task[Any]) -> None:
        # Retrieving the exception here also keeps asyncio from reporting
        # "exception was never retrieved" when every waiter has gone away.
        if task.cancelled():
            self._logger.warning("upstream_fetch_cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            self._logger.warning(
                "upstream_fetch_failed",
                task=task.get_name(),
                error_type=type(exc).__name__,
                error=str(exc),
            )
        else:
            self._logger.debug("upstream_fetch_complete", task=task.get_name())
