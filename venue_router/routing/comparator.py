from __future__ import annotations
from dataclasses import replace
from typing import Iterable, List

from loguru import logger

from venue_router.venues.fees import fee_adjusted_quote
from venue_router.venues.registry import VenueRegistry
from .types import RawQuote, VenueComparison


class VenueComparator:
    """Rank per-venue quotes for one symbol by taker-fee-adjusted mid price."""

    def __init__(self, registry: VenueRegistry):
        self.registry = registry

    def compare(self, symbol: str, quotes: Iterable[RawQuote]) -> List[VenueComparison]:
        rows: List[VenueComparison] = []
        for q in quotes:
            venue = self.registry.get_venue(q.venue_id)
            if venue is None or not venue.is_active:
                logger.debug("compare {}: dropping quote from unknown/inactive venue {}", symbol, q.venue_id)
                continue
            priced = fee_adjusted_quote(q.bid, q.ask, venue)
            rows.append(VenueComparison(
                venue=venue,
                symbol=symbol,
                bid=q.bid,
                ask=q.ask,
                captured_at=q.ts,
                mid_price=priced.mid_price,
                effective_bid=priced.effective_bid,
                effective_ask=priced.effective_ask,
                effective_mid_price=priced.effective_mid_price,
                spread=priced.spread,
                effective_spread=priced.effective_spread,
            ))

        if rows:
            best_idx = 0
            for i, row in enumerate(rows):
                # strict < keeps the first-seen row on ties
                if row.effective_mid_price < rows[best_idx].effective_mid_price:
                    best_idx = i
            best = rows[best_idx]
            rows[best_idx] = replace(best, is_best=True)

        # stable, so equal prices keep input order
        return sorted(rows, key=lambda r: r.effective_mid_price)


__all__ = ["VenueComparator"]
