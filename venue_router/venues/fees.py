"""Fee-adjusted pricing.

Every price is inflated by ``(1 + fee_rate)``. The comparison path always
uses the taker rate: routing assumes the order crosses the spread.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .registry import Venue


@dataclass(frozen=True)
class PricedQuote:
    mid_price: float
    effective_bid: float
    effective_ask: float
    effective_mid_price: float
    spread: float
    effective_spread: float


def effective_price(raw_price: float, venue: Venue, is_maker: bool = False) -> float:
    return raw_price * (1.0 + venue.fee_rate(is_maker))


def effective_spread(bid: float, ask: float, venue: Venue) -> float:
    # not clamped: a crossed book yields a negative value
    return effective_price(ask, venue) - effective_price(bid, venue)


def fee_adjusted_quote(bid: float, ask: float, venue: Venue) -> PricedQuote:
    eff_bid = effective_price(bid, venue, is_maker=False)
    eff_ask = effective_price(ask, venue, is_maker=False)
    return PricedQuote(
        mid_price=(bid + ask) / 2.0,
        effective_bid=eff_bid,
        effective_ask=eff_ask,
        effective_mid_price=(eff_bid + eff_ask) / 2.0,
        spread=ask - bid,
        effective_spread=eff_ask - eff_bid,
    )


def to_bps(value: float, reference: float) -> Optional[float]:
    if reference is None or reference <= 0:
        return None
    return value / reference * 10_000.0


__all__ = ["PricedQuote", "effective_price", "effective_spread", "fee_adjusted_quote", "to_bps"]
