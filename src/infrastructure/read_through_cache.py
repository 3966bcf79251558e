"""
Memoizing read-through cache with in-flight request deduplication.

Each key is either resolved (value stored for the cache's lifetime) or
in flight (one shared task every concurrent requester awaits). The in-flight
entry exists from the moment the fetch starts; a failed fetch leaves nothing
behind, so the next request retries.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ReadThroughCache(Generic[K, V]):
    """Per-key memoization of an async fetch function. No eviction."""

    def __init__(self, name: str, fetch: Callable[[K], Awaitable[V]]):
        self.name = name
        self._fetch = fetch
        self._entries: Dict[K, V] = {}
        self._inflight: Dict[K, "asyncio.Task[V]"] = {}
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: K) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, key: K) -> Optional[V]:
        """Return a resolved entry without fetching."""
        return self._entries.get(key)

    def is_inflight(self, key: K) -> bool:
        return key in self._inflight

    async def get(self, key: K) -> V:
        """
        Return the value for key, fetching it at most once.

        Cancelling a waiter does not cancel the shared fetch; its result still
        lands in the cache for later callers.
        """
        if key in self._entries:
            self.hits += 1
            return self._entries[key]

        task = self._inflight.get(key)
        if task is None:
            self.misses += 1
            logger.debug(f"[{self.name}] miss, fetching {key}")
            task = asyncio.ensure_future(self._load(key))
            self._inflight[key] = task
        else:
            logger.debug(f"[{self.name}] joining in-flight fetch for {key}")

        return await asyncio.shield(task)

    async def _load(self, key: K) -> V:
        try:
            value = await self._fetch(key)
            self._entries[key] = value
            return value
        finally:
            self._inflight.pop(key, None)
