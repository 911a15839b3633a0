from __future__ import annotations
from typing import Optional
import time

import httpx

from venue_router.routing.types import RawQuote
from .errors import ExchangeFetchError, parse_top_of_book
from .http import HTTPClient


class KrakenAdapter:
    id = "kraken"
    url = "https://api.kraken.com/0/public/Ticker"

    def __init__(self, rate_limit_rps: float = 0.25, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = HTTPClient(self.id, rate_limit_rps=rate_limit_rps, timeout=timeout, transport=transport)

    async def fetch_ticker(self, symbol: str) -> RawQuote:
        # Kraken expects its own pair naming (XBTUSDT), supplied by the market map
        j = await self.client.get_json(self.url, params={"pair": symbol})
        result = j.get("result") if isinstance(j, dict) else None
        if not result:
            raise ExchangeFetchError(self.id, f"Invalid Kraken payload for {symbol}")
        # response is keyed by Kraken's canonical pair name; take the first
        first = next(iter(result.values()))
        if not isinstance(first, dict):
            raise ExchangeFetchError(self.id, f"Invalid Kraken payload for {symbol}")
        bid, ask = parse_top_of_book(
            self.id, "Kraken", symbol, (first.get("b") or [None])[0], (first.get("a") or [None])[0]
        )
        return RawQuote(venue_id=self.id, bid=bid, ask=ask, ts=int(time.time() * 1000))

    async def close(self):
        await self.client.close()
