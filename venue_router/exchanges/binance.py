from __future__ import annotations
from typing import Optional
import time

import httpx
from loguru import logger

from venue_router.routing.types import RawQuote
from .coingecko import CoinGeckoClient
from .errors import ExchangeFetchError, parse_top_of_book
from .http import HTTPClient

# "Unavailable For Legal Reasons": Binance geo-blocks some regions
GEO_BLOCKED = 451


class BinanceAdapter:
    id = "binance"
    url = "https://api.binance.com/api/v3/ticker/bookTicker"

    def __init__(
        self,
        rate_limit_rps: float = 20.0,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        reference: Optional[CoinGeckoClient] = None,
    ):
        self.client = HTTPClient(self.id, rate_limit_rps=rate_limit_rps, timeout=timeout, transport=transport)
        # owned: closed together with the adapter
        self.reference = reference

    async def fetch_ticker(self, symbol: str) -> RawQuote:
        try:
            j = await self.client.get_json(self.url, params={"symbol": symbol})
        except ExchangeFetchError as e:
            if e.status != GEO_BLOCKED or self.reference is None:
                raise
            logger.warning("binance blocked for {}, using CoinGecko reference price", symbol)
            try:
                bid, ask = await self.reference.reference_quote(symbol)
            except ExchangeFetchError as ref_err:
                raise ExchangeFetchError(self.id, f"Binance blocked and CoinGecko fallback failed: {ref_err}", e.status) from ref_err
            return RawQuote(venue_id=self.id, bid=bid, ask=ask, ts=int(time.time() * 1000))

        ticker = j if isinstance(j, dict) else {}
        bid, ask = parse_top_of_book(self.id, "Binance", symbol, ticker.get("bidPrice"), ticker.get("askPrice"))
        return RawQuote(venue_id=self.id, bid=bid, ask=ask, ts=int(time.time() * 1000))

    async def close(self):
        await self.client.close()
        if self.reference is not None:
            await self.reference.close()
