from __future__ import annotations
from typing import Dict, Optional, Protocol

import httpx
from loguru import logger

from venue_router.routing.types import RawQuote
from venue_router.venues.registry import VenueRegistry
from .errors import ExchangeFetchError
from .binance import BinanceAdapter
from .coingecko import CoinGeckoClient
from .gateio import GateioAdapter
from .kraken import KrakenAdapter
from .okx import OKXAdapter


class TickerAdapter(Protocol):
    id: str

    async def fetch_ticker(self, symbol: str) -> RawQuote: ...
    async def close(self) -> None: ...


ADAPTER_CLASSES = {
    "binance": BinanceAdapter,
    "kraken": KrakenAdapter,
    "okx": OKXAdapter,
    "gateio": GateioAdapter,
}


class ExchangeFetcher:
    """Dispatch ``fetch_order_book(venue_id, venue_symbol)`` to the venue's adapter."""

    def __init__(self, adapters: Dict[str, TickerAdapter]):
        self.adapters = dict(adapters)

    async def fetch_order_book(self, venue_id: str, venue_symbol: str) -> RawQuote:
        adapter = self.adapters.get(venue_id)
        if adapter is None:
            raise ExchangeFetchError(venue_id, f"No fetcher registered for venue {venue_id}")
        return await adapter.fetch_ticker(venue_symbol)

    __call__ = fetch_order_book

    async def close(self):
        for adapter in self.adapters.values():
            await adapter.close()


def build_fetcher(
    registry: Optional[VenueRegistry] = None,
    timeout: float = 10.0,
    rate_limit_overrides: Optional[Dict[str, float]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    reference_fallback: bool = True,
) -> ExchangeFetcher:
    """Instantiate every known adapter, pacing each by its venue's published API limit.

    With ``reference_fallback`` the Binance adapter answers a geo-block (451)
    with a CoinGecko reference quote instead of an error.
    """
    overrides = rate_limit_overrides or {}
    adapters: Dict[str, TickerAdapter] = {}
    for vid, cls in ADAPTER_CLASSES.items():
        kwargs = {"timeout": timeout, "transport": transport}
        rps = overrides.get(vid)
        if rps is None and registry is not None:
            venue = registry.get_venue(vid)
            if venue is not None and venue.api_rate_limit is not None:
                rps = venue.api_rate_limit.per_second
        if rps is not None:
            kwargs["rate_limit_rps"] = rps
        if cls is BinanceAdapter and reference_fallback:
            kwargs["reference"] = CoinGeckoClient(
                rate_limit_rps=overrides.get(CoinGeckoClient.id, 1.0), timeout=timeout, transport=transport
            )
        adapters[vid] = cls(**kwargs)
    logger.debug("exchange adapters ready: {}", sorted(adapters))
    return ExchangeFetcher(adapters)


__all__ = ["ExchangeFetcher", "TickerAdapter", "ADAPTER_CLASSES", "build_fetcher"]
