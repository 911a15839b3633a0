from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from venue_router.venues.fees import to_bps
from venue_router.venues.registry import Venue

SIDES = ("buy", "sell")


@dataclass(frozen=True)
class RawQuote:
    venue_id: str
    bid: float
    ask: float
    ts: int  # capture instant, ms


@dataclass
class CacheEntry:
    quote: RawQuote
    stored_at: int  # ms


@dataclass(frozen=True)
class VenueComparison:
    venue: Venue
    symbol: str
    bid: float
    ask: float
    captured_at: int
    mid_price: float
    effective_bid: float
    effective_ask: float
    effective_mid_price: float
    spread: float
    effective_spread: float
    is_best: bool = False

    @property
    def venue_id(self) -> str:
        return self.venue.id

    @property
    def spread_bps(self) -> Optional[float]:
        return to_bps(self.spread, self.mid_price)

    @property
    def effective_spread_bps(self) -> Optional[float]:
        return to_bps(self.effective_spread, self.effective_mid_price)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "venue_id": self.venue.id,
            "venue_name": self.venue.name,
            "symbol": self.symbol,
            "bid": self.bid,
            "ask": self.ask,
            "captured_at": self.captured_at,
            "mid_price": self.mid_price,
            "effective_bid": self.effective_bid,
            "effective_ask": self.effective_ask,
            "effective_mid_price": self.effective_mid_price,
            "spread": self.spread,
            "effective_spread": self.effective_spread,
            "spread_bps": self.spread_bps,
            "effective_spread_bps": self.effective_spread_bps,
            "is_best": self.is_best,
        }


@dataclass(frozen=True)
class HistoryPoint:
    ts: int
    best_venue_id: Optional[str] = None
    best_venue_label: Optional[str] = None
    best_effective_mid_price: Optional[float] = None
    best_effective_spread_bps: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VenueQuoteStatus:
    venue_id: str
    bid: Optional[float]
    ask: Optional[float]
    ts: Optional[int]
    status: str  # ok|error
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SymbolSnapshot:
    symbol: str
    venues: List[VenueQuoteStatus]
    comparisons: List[VenueComparison]
    best_venue: Optional[VenueComparison]
    history: List[HistoryPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "venues": [v.to_dict() for v in self.venues],
            "comparisons": [c.to_dict() for c in self.comparisons],
            "best_venue": self.best_venue.to_dict() if self.best_venue else None,
            "history": [h.to_dict() for h in self.history],
        }


@dataclass(frozen=True)
class RouteRequest:
    symbol: str
    side: str  # buy|sell
    size: float
    reference_venue: Optional[str] = None


@dataclass(frozen=True)
class RouteQuote:
    venue_id: str
    venue_label: str
    effective_price: float
    raw_bid: float
    raw_ask: float
    effective_bid: float
    effective_ask: float
    effective_spread: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RouteSimulationResult:
    symbol: str
    side: str
    size: float
    ts: int
    best_route: Optional[RouteQuote]
    reference_route: Optional[RouteQuote]
    savings_usd: Optional[float]
    savings_bps: Optional[float]
    quotes: List[VenueComparison] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "side": self.side,
            "size": self.size,
            "ts": self.ts,
            "best_route": self.best_route.to_dict() if self.best_route else None,
            "reference_route": self.reference_route.to_dict() if self.reference_route else None,
            "savings_usd": self.savings_usd,
            "savings_bps": self.savings_bps,
            "quotes": [q.to_dict() for q in self.quotes],
        }


class UnsupportedSymbolError(KeyError):
    """Symbol has no venue mapping in the market configuration."""

    def __init__(self, symbol: str):
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self) -> str:
        return f"Unsupported symbol '{self.symbol}'"


class InvalidRouteRequest(ValueError):
    pass


__all__ = [
    "SIDES",
    "RawQuote",
    "CacheEntry",
    "VenueComparison",
    "HistoryPoint",
    "VenueQuoteStatus",
    "SymbolSnapshot",
    "RouteRequest",
    "RouteQuote",
    "RouteSimulationResult",
    "UnsupportedSymbolError",
    "InvalidRouteRequest",
]
