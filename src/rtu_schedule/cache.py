"""Time-based cache with single-flight request coalescing.

Used by DiscoveryService (period/program catalogs) and RTUApiClient (raw
API responses). Concurrent callers asking for the same key while it is cold
await one shared in-flight task instead of each hitting the network. Only
successful results are stored, so a failed fetch is retried on the next call.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from rtu_schedule.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    data: T
    timestamp: float


class TTLCache:
    """Per-instance cache keyed by request signature.

    Args:
        ttl: Lifetime of an entry in seconds. ``0`` disables caching
            but still coalesces concurrent requests.
        name: Label used in log events.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        ttl: float,
        *,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.name = name
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry[Any]] = {}
        self._inflight: dict[Hashable, asyncio.Task[Any]] = {}
        # Bumped on clear() so late in-flight results are not stored
        self._generation = 0

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value if present and fresh, else None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl:
            del self._entries[key]
            return None
        return entry.data

    async def get_or_fetch(self, key: Hashable, fetch: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for key, fetching it at most once concurrently."""
        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.timestamp < self.ttl:
            log.debug("cache_hit", cache=self.name, key=key)
            return entry.data

        task = self._inflight.get(key)
        if task is None:
            log.debug("cache_miss", cache=self.name, key=key)
            task = asyncio.ensure_future(self._load(key, fetch, self._generation))
            self._inflight[key] = task
        else:
            log.debug("cache_coalesced", cache=self.name, key=key)
        return await task

    async def _load(
        self, key: Hashable, fetch: Callable[[], Awaitable[T]], generation: int
    ) -> T:
        try:
            data = await fetch()
            if generation == self._generation:
                self._entries[key] = CacheEntry(data=data, timestamp=self._clock())
            return data
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

    def clear(self) -> None:
        """Drop every entry unconditionally."""
        self._entries.clear()
        self._inflight.clear()
        self._generation += 1
        log.debug("cache_cleared", cache=self.name)

    def __len__(self) -> int:
        return len(self._entries)
