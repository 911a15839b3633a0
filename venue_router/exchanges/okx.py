from __future__ import annotations
from typing import Optional
import time

import httpx

from venue_router.routing.types import RawQuote
from .errors import parse_top_of_book
from .http import HTTPClient


class OKXAdapter:
    id = "okx"
    url = "https://www.okx.com/api/v5/market/ticker"

    def __init__(self, rate_limit_rps: float = 10.0, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = HTTPClient(self.id, rate_limit_rps=rate_limit_rps, timeout=timeout, transport=transport)

    async def fetch_ticker(self, symbol: str) -> RawQuote:
        j = await self.client.get_json(self.url, params={"instId": symbol})
        data = (j.get("data") if isinstance(j, dict) else None) or [{}]
        ticker = data[0] or {}
        bid, ask = parse_top_of_book(self.id, "OKX", symbol, ticker.get("bidPx"), ticker.get("askPx"))
        try:
            ts = int(ticker.get("ts"))
        except (TypeError, ValueError):
            ts = int(time.time() * 1000)
        return RawQuote(venue_id=self.id, bid=bid, ask=ask, ts=ts)

    async def close(self):
        await self.client.close()
