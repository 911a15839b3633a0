"""Static venue directory with fee schedules and supported pairs.

The registry is an immutable value built once at startup (``default_registry``)
and handed to the comparator / aggregator. Lookups never raise: an unknown id
is simply ``None``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional


class VenueStatus(str, Enum):
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class RateLimit:
    requests: int
    window_s: float

    @property
    def per_second(self) -> float:
        return self.requests / self.window_s if self.window_s > 0 else float(self.requests)


@dataclass(frozen=True)
class Venue:
    id: str
    name: str
    maker_fee: float  # fractional, 0.001 == 0.1%
    taker_fee: float
    supported_pairs: frozenset = field(default_factory=frozenset)
    status: VenueStatus = VenueStatus.ACTIVE
    withdrawal_fees: Mapping[str, float] = field(default_factory=dict, hash=False)
    min_order_size: Mapping[str, float] = field(default_factory=dict, hash=False)
    api_rate_limit: Optional[RateLimit] = None

    @property
    def is_active(self) -> bool:
        return self.status == VenueStatus.ACTIVE

    def fee_rate(self, is_maker: bool = False) -> float:
        return self.maker_fee if is_maker else self.taker_fee


@dataclass(frozen=True)
class FeeQuote:
    venue: Venue
    maker_fee: float
    taker_fee: float
    total_cost: float


class VenueRegistry:
    def __init__(self, venues: Iterable[Venue]):
        table: Dict[str, Venue] = {}
        for v in venues:
            key = v.id.lower()
            if key in table:
                raise ValueError(f"duplicate venue id '{v.id}'")
            table[key] = v
        self._venues = MappingProxyType(table)

    def __len__(self) -> int:
        return len(self._venues)

    def __contains__(self, venue_id: object) -> bool:
        return isinstance(venue_id, str) and venue_id.lower() in self._venues

    def get_venue(self, venue_id: str) -> Optional[Venue]:
        if not venue_id:
            return None
        return self._venues.get(venue_id.lower())

    def list_active_venues(self) -> List[Venue]:
        return [v for v in self._venues.values() if v.is_active]

    @staticmethod
    def venue_supports_pair(venue: Venue, pair: str) -> bool:
        return pair in venue.supported_pairs

    def calculate_trading_fee(self, venue_id: str, amount: float, is_maker: bool = False) -> float:
        venue = self.get_venue(venue_id)
        if venue is None:
            return 0.0
        return amount * venue.fee_rate(is_maker)

    def _active_for_pair(self, pair: str) -> List[Venue]:
        return [v for v in self.list_active_venues() if self.venue_supports_pair(v, pair)]

    def best_venue_for_pair(self, pair: str, amount: float, is_maker: bool = False) -> Optional[Venue]:
        """Cheapest active venue by fee alone (first one wins ties)."""
        best: Optional[Venue] = None
        best_fee = float("inf")
        for v in self._active_for_pair(pair):
            fee = self.calculate_trading_fee(v.id, amount, is_maker)
            if fee < best_fee:
                best, best_fee = v, fee
        return best

    def fee_comparison(self, pair: str, amount: float) -> List[FeeQuote]:
        rows = [
            FeeQuote(
                venue=v,
                maker_fee=self.calculate_trading_fee(v.id, amount, True),
                taker_fee=self.calculate_trading_fee(v.id, amount, False),
                total_cost=amount + self.calculate_trading_fee(v.id, amount, False),
            )
            for v in self._active_for_pair(pair)
        ]
        rows.sort(key=lambda r: r.total_cost)
        return rows


_MAJOR_USDT = ("BTC/USDT", "ETH/USDT", "SOL/USDT", "ADA/USDT")

DEFAULT_VENUES: tuple = (
    Venue(
        id="binance", name="Binance", maker_fee=0.001, taker_fee=0.001,
        supported_pairs=frozenset({*_MAJOR_USDT, "BTC/USDC", "ETH/USDC"}),
        withdrawal_fees={"BTC": 0.0005, "ETH": 0.005, "USDT": 1, "USDC": 1},
        min_order_size={"BTC": 0.00001, "ETH": 0.001, "USDT": 10, "USDC": 10},
        api_rate_limit=RateLimit(1200, 60),
    ),
    Venue(
        id="coinbase", name="Coinbase", maker_fee=0.004, taker_fee=0.006,
        supported_pairs=frozenset({"BTC/USD", "ETH/USD", "BTC/USDT", "ETH/USDT"}),
        withdrawal_fees={"BTC": 0.0001, "ETH": 0.002, "USDT": 0, "USDC": 0},
        min_order_size={"BTC": 0.0001, "ETH": 0.001, "USDT": 1, "USDC": 1},
        api_rate_limit=RateLimit(100, 60),
    ),
    Venue(
        id="kraken", name="Kraken", maker_fee=0.0016, taker_fee=0.0026,
        supported_pairs=frozenset({"BTC/USD", "ETH/USD", *_MAJOR_USDT}),
        withdrawal_fees={"BTC": 0.0005, "ETH": 0.005, "USDT": 5, "USDC": 0},
        min_order_size={"BTC": 0.0001, "ETH": 0.001, "USDT": 5, "USDC": 1},
        api_rate_limit=RateLimit(15, 60),
    ),
    Venue(
        id="kucoin", name="KuCoin", maker_fee=0.001, taker_fee=0.001,
        supported_pairs=frozenset({"BTC/USDT", "ETH/USDT", "BTC/USDC", "ETH/USDC"}),
        withdrawal_fees={"BTC": 0.0005, "ETH": 0.01, "USDT": 1, "USDC": 1},
        min_order_size={"BTC": 0.0001, "ETH": 0.001, "USDT": 1, "USDC": 1},
        api_rate_limit=RateLimit(1800, 60),
    ),
    Venue(
        id="okx", name="OKX", maker_fee=0.0008, taker_fee=0.001,
        supported_pairs=frozenset({*_MAJOR_USDT, "BTC/USDC", "ETH/USDC"}),
        withdrawal_fees={"BTC": 0.0001, "ETH": 0.0012, "USDT": 1, "USDC": 1},
        min_order_size={"BTC": 0.00001, "ETH": 0.0001, "USDT": 1, "USDC": 1},
        api_rate_limit=RateLimit(20, 2),
    ),
    Venue(
        id="gateio", name="Gate.io", maker_fee=0.002, taker_fee=0.002,
        supported_pairs=frozenset(_MAJOR_USDT),
        withdrawal_fees={"BTC": 0.001, "ETH": 0.003, "USDT": 1, "USDC": 1},
        min_order_size={"BTC": 0.0001, "ETH": 0.001, "USDT": 1, "USDC": 1},
        api_rate_limit=RateLimit(200, 10),
    ),
)


def default_registry() -> VenueRegistry:
    return VenueRegistry(DEFAULT_VENUES)


__all__ = [
    "VenueStatus",
    "RateLimit",
    "Venue",
    "FeeQuote",
    "VenueRegistry",
    "DEFAULT_VENUES",
    "default_registry",
]
