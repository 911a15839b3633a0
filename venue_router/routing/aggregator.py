"""Snapshot aggregation: concurrent per-venue fetch, comparison, history.

One venue failing never sinks the snapshot: every mapped venue gets an entry,
failed ones carry ``status='error'`` and the message. Only fetch errors are
contained here; anything raised while comparing propagates.
"""
from __future__ import annotations
import asyncio
import math
from typing import List, Optional

from loguru import logger

from venue_router.venues.markets import SymbolMapper
from .cache import Clock, QuoteCache, now_ms
from .comparator import VenueComparator
from .history import DEFAULT_WINDOW, HistoryStore
from .types import RawQuote, SymbolSnapshot, UnsupportedSymbolError, VenueQuoteStatus


class SnapshotAggregator:
    def __init__(
        self,
        comparator: VenueComparator,
        cache: QuoteCache,
        history: HistoryStore,
        mapper: SymbolMapper,
        history_window: int = DEFAULT_WINDOW,
        clock: Optional[Clock] = None,
    ):
        self.comparator = comparator
        self.cache = cache
        self.history = history
        self.mapper = mapper
        self.history_window = history_window
        self._clock = clock or now_ms

    async def get_symbol_snapshot(self, symbol: str) -> SymbolSnapshot:
        if not self.mapper.is_supported(symbol):
            raise UnsupportedSymbolError(symbol)
        venues = list(self.mapper.venues_for(symbol).items())

        results = await asyncio.gather(
            *(self.cache.get(vid, vsym) for vid, vsym in venues),
            return_exceptions=True,
        )

        statuses: List[VenueQuoteStatus] = []
        for (vid, vsym), r in zip(venues, results):
            if isinstance(r, RawQuote):
                statuses.append(VenueQuoteStatus(venue_id=vid, bid=r.bid, ask=r.ask, ts=r.ts, status="ok"))
            elif isinstance(r, Exception):
                logger.warning("quote fetch failed {} {} ({}): {}", vid, vsym, symbol, r)
                statuses.append(VenueQuoteStatus(
                    venue_id=vid,
                    bid=None,
                    ask=None,
                    ts=None,
                    status="error",
                    error=str(r) or type(r).__name__,
                    status_code=getattr(r, "status", None),
                ))
            else:
                # CancelledError and friends are not venue failures
                raise r

        valid = [
            RawQuote(venue_id=s.venue_id, bid=s.bid, ask=s.ask, ts=s.ts)
            for s in statuses
            if s.ok and math.isfinite(s.bid) and math.isfinite(s.ask)
        ]
        comparisons = self.comparator.compare(symbol, valid)
        best = next((c for c in comparisons if c.is_best), None)

        self.history.record(symbol, comparisons, ts=self._clock(), label_for=self.mapper.label)

        return SymbolSnapshot(
            symbol=symbol,
            venues=statuses,
            comparisons=comparisons,
            best_venue=best,
            history=self.history.get(symbol, self.history_window),
        )

    async def get_symbol_snapshots(self, symbols: List[str]) -> List[SymbolSnapshot]:
        """Snapshots for several symbols, fetched concurrently.

        Every symbol is checked before any fetch starts, so an unsupported
        entry fails the call up front instead of abandoning fetches already
        under way for the others. Venue failures stay contained per symbol.
        """
        for s in symbols:
            if not self.mapper.is_supported(s):
                raise UnsupportedSymbolError(s)
        return list(await asyncio.gather(*(self.get_symbol_snapshot(s) for s in symbols)))


__all__ = ["SnapshotAggregator"]
