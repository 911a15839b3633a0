"""Async HTTP helpers and a tiny token-bucket for rate limiting."""
from typing import Any, Optional
import asyncio, time
import httpx

from .errors import ExchangeFetchError

USER_AGENT = "venue-router/1.0"


class AsyncTokenBucket:
    def __init__(self, rate: float, capacity: float = None):
        if rate <= 0:
            raise ValueError("rate must be > 0")
        self.rate = rate
        # sub-1 rps venues (kraken) still need room for one whole request
        self.capacity = capacity or max(1.0, rate)
        self._tokens = self.capacity
        self._last = time.monotonic()
        self._lock = asyncio.Lock()

    async def take(self, tokens: float = 1.0):
        while True:
            async with self._lock:
                now = time.monotonic()
                elapsed = now - self._last
                self._last = now
                self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
                if tokens <= self._tokens:
                    self._tokens -= tokens
                    return
                # wait until tokens available
                wait = (tokens - self._tokens) / self.rate
            await asyncio.sleep(wait)


class HTTPClient:
    def __init__(
        self,
        venue_id: str,
        rate_limit_rps: float = 5.0,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.venue_id = venue_id
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )
        self._bucket = AsyncTokenBucket(rate_limit_rps)

    async def get_json(self, url: str, params: Optional[dict] = None) -> Any:
        await self._bucket.take(1.0)
        try:
            r = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise ExchangeFetchError(self.venue_id, f"Request to {self.venue_id} failed: {e}") from e
        if not r.is_success:
            raise ExchangeFetchError(self.venue_id, f"Request failed with status {r.status_code}", r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise ExchangeFetchError(self.venue_id, f"Malformed JSON from {self.venue_id}", r.status_code) from e

    async def close(self):
        await self._client.aclose()
