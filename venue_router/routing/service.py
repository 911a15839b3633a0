"""Process-wide router service.

Wires one registry, quote cache and history store into the aggregator and
route simulator. The cache and history are the only mutable shared state;
they assume a single event loop and carry no locks.
"""
from __future__ import annotations
from typing import List, Optional

from loguru import logger

from venue_router.core.config import Settings
from venue_router.venues.markets import SymbolMapper
from venue_router.venues.registry import VenueRegistry, default_registry
from .aggregator import SnapshotAggregator
from .cache import Clock, Fetcher, QuoteCache, now_ms
from .comparator import VenueComparator
from .history import DEFAULT_WINDOW, HistoryStore
from .router import RouteSimulator
from .types import HistoryPoint, RouteRequest, RouteSimulationResult, SymbolSnapshot


class RouterService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[Fetcher] = None,
        registry: Optional[VenueRegistry] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings or Settings()
        self.registry = registry or default_registry()
        clock = clock or now_ms
        rcfg = self.settings.router

        self._owned_fetcher = None
        if fetcher is None:
            from venue_router.exchanges import build_fetcher

            self._owned_fetcher = build_fetcher(
                self.registry,
                timeout=self.settings.exchanges.timeout_s,
                rate_limit_overrides=self.settings.exchanges.rate_limit_rps,
                reference_fallback=self.settings.exchanges.reference_fallback,
            )
            fetcher = self._owned_fetcher

        self.mapper = SymbolMapper(rcfg.symbols, rcfg.venue_labels())
        self.cache = QuoteCache(fetcher, ttl_ms=rcfg.cache.ttl_ms, clock=clock)
        self.history = HistoryStore(limit=rcfg.history.limit)
        self.comparator = VenueComparator(self.registry)
        self.aggregator = SnapshotAggregator(
            self.comparator, self.cache, self.history, self.mapper,
            history_window=rcfg.history.window, clock=clock,
        )
        self.simulator = RouteSimulator(self.aggregator, self.mapper, clock=clock)

    @property
    def supported_symbols(self) -> List[str]:
        return self.mapper.symbols

    async def get_symbol_snapshot(self, symbol: str) -> SymbolSnapshot:
        return await self.aggregator.get_symbol_snapshot(symbol)

    async def get_symbol_snapshots(self, symbols: List[str]) -> List[SymbolSnapshot]:
        return await self.aggregator.get_symbol_snapshots(symbols)

    def get_router_history(self, symbol: str, limit: int = DEFAULT_WINDOW) -> List[HistoryPoint]:
        return self.history.get(symbol, limit)

    async def simulate_route(self, request: RouteRequest) -> RouteSimulationResult:
        return await self.simulator.simulate_route(request)

    async def aclose(self) -> None:
        if self._owned_fetcher is not None:
            await self._owned_fetcher.close()
            self._owned_fetcher = None


_default_service: Optional[RouterService] = None


def get_default_service(settings: Optional[Settings] = None) -> RouterService:
    """Lazily build the shared service; later calls ignore ``settings``."""
    global _default_service
    if _default_service is None:
        _default_service = RouterService(settings=settings)
        logger.debug("router service initialised for {}", _default_service.supported_symbols)
    return _default_service


__all__ = ["RouterService", "get_default_service"]
