from __future__ import annotations
from typing import Callable, List, Optional, Tuple

from loguru import logger

from venue_router.venues.markets import SymbolMapper
from .aggregator import SnapshotAggregator
from .cache import Clock, now_ms
from .types import RouteQuote, RouteRequest, RouteSimulationResult, VenueComparison

PriceSelector = Callable[[VenueComparison], float]


def _selector(side: str) -> PriceSelector:
    if side == "buy":
        return lambda c: c.effective_ask
    return lambda c: c.effective_bid


def compute_savings(side: str, best_price: float, reference_price: float, size: float) -> Tuple[float, Optional[float]]:
    """Savings of the best route versus the reference, in quote currency and bps."""
    edge = reference_price - best_price if side == "buy" else best_price - reference_price
    savings_bps = edge / reference_price * 10_000.0 if reference_price > 0 else None
    return edge * size, savings_bps


class RouteSimulator:
    """Pick the cheapest (buy) or best-paying (sell) venue from a live snapshot."""

    def __init__(self, aggregator: SnapshotAggregator, mapper: SymbolMapper, clock: Optional[Clock] = None):
        self.aggregator = aggregator
        self.mapper = mapper
        self._clock = clock or now_ms

    def _route_quote(self, comp: VenueComparison, select: PriceSelector) -> RouteQuote:
        return RouteQuote(
            venue_id=comp.venue.id,
            venue_label=self.mapper.label(comp.venue.id) or comp.venue.name,
            effective_price=select(comp),
            raw_bid=comp.bid,
            raw_ask=comp.ask,
            effective_bid=comp.effective_bid,
            effective_ask=comp.effective_ask,
            effective_spread=comp.effective_spread,
        )

    async def simulate_route(self, request: RouteRequest) -> RouteSimulationResult:
        snapshot = await self.aggregator.get_symbol_snapshot(request.symbol)
        quotes: List[VenueComparison] = snapshot.comparisons
        select = _selector(request.side)

        ranked = sorted(quotes, key=select, reverse=(request.side == "sell"))
        best = ranked[0] if ranked else None

        reference = None
        ref_id = self.mapper.resolve_venue(request.reference_venue)
        if ref_id is not None:
            reference = next((c for c in quotes if c.venue.id == ref_id), None)
        elif request.reference_venue:
            logger.debug("reference venue '{}' did not resolve", request.reference_venue)

        best_route = self._route_quote(best, select) if best else None
        reference_route = self._route_quote(reference, select) if reference else None

        savings_usd: Optional[float] = None
        savings_bps: Optional[float] = None
        if best_route and reference_route and best_route.venue_id != reference_route.venue_id:
            savings_usd, savings_bps = compute_savings(
                request.side, best_route.effective_price, reference_route.effective_price, request.size
            )

        return RouteSimulationResult(
            symbol=request.symbol,
            side=request.side,
            size=request.size,
            ts=self._clock(),
            best_route=best_route,
            reference_route=reference_route,
            savings_usd=savings_usd,
            savings_bps=savings_bps,
            quotes=quotes,
        )


__all__ = ["RouteSimulator", "compute_savings"]
