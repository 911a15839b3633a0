"""CoinGecko reference prices (USD), used when a venue cannot quote itself."""
from __future__ import annotations
from typing import Dict, Iterable, Optional, Tuple, Union

import httpx

from venue_router.venues.markets import coingecko_id
from .errors import ExchangeFetchError
from .http import HTTPClient

# full width of the synthetic spread, as a fraction of the reference price
REFERENCE_SPREAD = 0.001


class CoinGeckoClient:
    id = "coingecko"
    base_url = "https://api.coingecko.com/api/v3"

    def __init__(self, rate_limit_rps: float = 1.0, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = HTTPClient(self.id, rate_limit_rps=rate_limit_rps, timeout=timeout, transport=transport)

    async def get_simple_price(
        self,
        ids: Union[str, Iterable[str]],
        vs_currencies: Union[str, Iterable[str]] = "usd",
        include_24hr_change: bool = False,
    ) -> Dict[str, Dict[str, float]]:
        params = {
            "ids": ids if isinstance(ids, str) else ",".join(ids),
            "vs_currencies": vs_currencies if isinstance(vs_currencies, str) else ",".join(vs_currencies),
        }
        if include_24hr_change:
            params["include_24hr_change"] = "true"
        j = await self.client.get_json(f"{self.base_url}/simple/price", params=params)
        if not isinstance(j, dict):
            raise ExchangeFetchError(self.id, "Invalid CoinGecko payload")
        return j

    async def reference_price(self, symbol: str, vs_currency: str = "usd") -> float:
        coin = coingecko_id(symbol)
        if coin is None:
            raise ExchangeFetchError(self.id, f"No CoinGecko id for {symbol}")
        prices = await self.get_simple_price(coin, vs_currency)
        price = (prices.get(coin) or {}).get(vs_currency)
        if not isinstance(price, (int, float)) or price <= 0:
            raise ExchangeFetchError(self.id, f"Invalid CoinGecko data for {symbol}")
        return float(price)

    async def reference_quote(self, symbol: str) -> Tuple[float, float]:
        """(bid, ask) straddling the reference price by ``REFERENCE_SPREAD``."""
        price = await self.reference_price(symbol)
        half = price * REFERENCE_SPREAD / 2.0
        return price - half, price + half

    async def close(self):
        await self.client.close()
