from __future__ import annotations
import collections
from typing import Callable, Deque, Dict, List, Optional

from .types import HistoryPoint, VenueComparison

HISTORY_LIMIT = 120
DEFAULT_WINDOW = 60


class HistoryStore:
    """Per-symbol FIFO ring of best-venue history points."""

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit <= 0:
            raise ValueError("limit must be > 0")
        self.limit = limit
        self._points: Dict[str, Deque[HistoryPoint]] = {}

    def _ring(self, symbol: str) -> Deque[HistoryPoint]:
        ring = self._points.get(symbol)
        if ring is None:
            ring = collections.deque(maxlen=self.limit)
            self._points[symbol] = ring
        return ring

    def append(self, symbol: str, point: HistoryPoint) -> None:
        self._ring(symbol).append(point)

    def record(
        self,
        symbol: str,
        comparisons: List[VenueComparison],
        ts: int,
        label_for: Optional[Callable[[str], Optional[str]]] = None,
    ) -> HistoryPoint:
        best = next((c for c in comparisons if c.is_best), None)
        if best is None:
            point = HistoryPoint(ts=ts)
        else:
            label = label_for(best.venue.id) if label_for else None
            point = HistoryPoint(
                ts=ts,
                best_venue_id=best.venue.id,
                best_venue_label=label or best.venue.name,
                best_effective_mid_price=best.effective_mid_price,
                best_effective_spread_bps=best.effective_spread_bps,
            )
        self.append(symbol, point)
        return point

    def get(self, symbol: str, limit: int = DEFAULT_WINDOW) -> List[HistoryPoint]:
        ring = self._points.get(symbol)
        if not ring or limit <= 0:
            return []
        return list(ring)[-limit:]

    def __len__(self) -> int:
        return sum(len(r) for r in self._points.values())


__all__ = ["HistoryStore", "HISTORY_LIMIT", "DEFAULT_WINDOW"]
