"""Short-TTL quote cache in front of the per-venue fetch adapters.

Entries live for ``ttl_ms`` (5s by default). A failed refresh leaves the
previous entry alone and re-raises to the caller; failures are never cached.
Concurrent misses on the same key share one in-flight fetch.
"""
from __future__ import annotations
import asyncio
import time
from typing import Awaitable, Callable, Dict, Optional

from loguru import logger

from .types import CacheEntry, RawQuote

DEFAULT_TTL_MS = 5_000

Fetcher = Callable[[str, str], Awaitable[RawQuote]]
Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def cache_key(venue_id: str, venue_symbol: str) -> str:
    return f"{venue_id}:{venue_symbol}"


class QuoteCache:
    def __init__(self, fetcher: Fetcher, ttl_ms: int = DEFAULT_TTL_MS, clock: Optional[Clock] = None):
        self._fetcher = fetcher
        self.ttl_ms = ttl_ms
        self._clock = clock or now_ms
        self._entries: Dict[str, CacheEntry] = {}
        self._inflight: Dict[str, asyncio.Future] = {}
        self._generation = 0
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, venue_id: str, venue_symbol: str) -> Optional[CacheEntry]:
        return self._entries.get(cache_key(venue_id, venue_symbol))

    def is_live(self, entry: Optional[CacheEntry]) -> bool:
        return entry is not None and self._clock() - entry.stored_at <= self.ttl_ms

    def clear(self) -> None:
        """Drop all entries. Fetches already in flight still answer their
        waiters but no longer write back into the cache."""
        self._entries.clear()
        self._inflight.clear()
        self._generation += 1

    async def get(self, venue_id: str, venue_symbol: str) -> RawQuote:
        key = cache_key(venue_id, venue_symbol)
        entry = self._entries.get(key)
        if self.is_live(entry):
            self.hits += 1
            logger.debug("quote cache hit {}", key)
            return entry.quote

        pending = self._inflight.get(key)
        if pending is None:
            self.misses += 1
            pending = asyncio.ensure_future(self._refresh(key, venue_id, venue_symbol, self._generation))
            self._inflight[key] = pending
        # shield: one cancelled waiter must not cancel the fetch for the others
        return await asyncio.shield(pending)

    async def _refresh(self, key: str, venue_id: str, venue_symbol: str, generation: int) -> RawQuote:
        try:
            quote = await self._fetcher(venue_id, venue_symbol)
            if generation == self._generation:
                self._entries[key] = CacheEntry(quote=quote, stored_at=self._clock())
            return quote
        finally:
            if generation == self._generation:
                self._inflight.pop(key, None)


__all__ = ["QuoteCache", "DEFAULT_TTL_MS", "cache_key", "now_ms"]
