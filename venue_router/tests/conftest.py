"""
Shared fixtures for the venue_router test suite.

No test touches the network: quotes come from ``FakeFetcher`` and time from
``FakeClock`` so cache TTL behaviour is deterministic.
"""
import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from venue_router.core.config import Settings
from venue_router.exchanges.errors import ExchangeFetchError
from venue_router.routing.service import RouterService
from venue_router.routing.types import RawQuote
from venue_router.venues.registry import Venue, VenueRegistry, VenueStatus


class FakeClock:
    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


class FakeFetcher:
    """Scripted ``fetch_order_book``: per venue a (bid, ask) pair or an exception."""

    def __init__(self, books: Optional[Dict[str, object]] = None, clock: Optional[FakeClock] = None, delay: float = 0.0):
        self.books: Dict[str, object] = dict(books or {})
        self.calls: List[Tuple[str, str]] = []
        self.clock = clock
        self.delay = delay

    async def __call__(self, venue_id: str, venue_symbol: str) -> RawQuote:
        self.calls.append((venue_id, venue_symbol))
        if self.delay:
            await asyncio.sleep(self.delay)
        book = self.books.get(venue_id)
        if book is None:
            raise ExchangeFetchError(venue_id, f"No fetcher registered for venue {venue_id}")
        if isinstance(book, Exception):
            raise book
        bid, ask = book
        ts = self.clock() if self.clock else 0
        return RawQuote(venue_id=venue_id, bid=bid, ask=ask, ts=ts)


def make_venue(vid: str, taker: float = 0.001, maker: float = 0.001, status: VenueStatus = VenueStatus.ACTIVE, name: Optional[str] = None) -> Venue:
    return Venue(
        id=vid,
        name=name or vid.upper(),
        maker_fee=maker,
        taker_fee=taker,
        supported_pairs=frozenset({"BTC/USDT", "ETH/USDT"}),
        status=status,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def zero_fee_registry() -> VenueRegistry:
    """Three fee-free venues so effective prices equal raw prices."""
    return VenueRegistry([make_venue("alpha", 0.0, 0.0), make_venue("beta", 0.0, 0.0), make_venue("gamma", 0.0, 0.0)])


@pytest.fixture
def test_settings() -> Settings:
    return Settings.model_validate({
        "router": {
            "symbols": {
                "BTC/USDT": {"alpha": "BTCUSDT", "beta": "BTC-USDT", "gamma": "BTC_USDT"},
                "ETH/USDT": {"alpha": "ETHUSDT", "beta": "ETH-USDT"},
            },
            "venues": {
                "alpha": {"label": "Alpha Exchange"},
                "beta": {"label": "Beta"},
                "gamma": {"label": "Gamma"},
            },
        }
    })


@pytest.fixture
def make_service(test_settings, zero_fee_registry, clock):
    def _make(books, registry=None, settings=None):
        fetcher = FakeFetcher(books, clock=clock)
        svc = RouterService(
            settings=settings or test_settings,
            fetcher=fetcher,
            registry=registry or zero_fee_registry,
            clock=clock,
        )
        return svc, fetcher
    return _make
