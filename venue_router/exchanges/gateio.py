from __future__ import annotations
from typing import Optional
import time

import httpx

from venue_router.routing.types import RawQuote
from .errors import parse_top_of_book
from .http import HTTPClient


class GateioAdapter:
    id = "gateio"
    url = "https://api.gateio.ws/api/v4/spot/tickers"

    def __init__(self, rate_limit_rps: float = 20.0, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = HTTPClient(self.id, rate_limit_rps=rate_limit_rps, timeout=timeout, transport=transport)

    async def fetch_ticker(self, symbol: str) -> RawQuote:
        pair = symbol if "_" in symbol else symbol.replace("/", "_")
        j = await self.client.get_json(self.url, params={"currency_pair": pair})
        ticker = j[0] if isinstance(j, list) and j else {}
        bid, ask = parse_top_of_book(self.id, "Gate.io", symbol, ticker.get("highest_bid"), ticker.get("lowest_ask"))
        return RawQuote(venue_id=self.id, bid=bid, ask=ask, ts=int(time.time() * 1000))

    async def close(self):
        await self.client.close()
