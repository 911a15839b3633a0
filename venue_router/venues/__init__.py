"""Venue directory, market tables and fee-adjusted pricing.

Modules:
  registry.py : Venue dataclass, VenueRegistry lookups, built-in venue table.
  markets.py  : symbol -> venue-native symbol map, venue labels, SymbolMapper,
                CoinGecko coin ids for reference prices.
  fees.py     : effective (fee-inflated) prices and spreads.
"""

from .registry import Venue, VenueStatus, VenueRegistry, FeeQuote, RateLimit, default_registry  # noqa: F401
from .markets import SymbolMapper, SYMBOL_CONFIG, VENUE_METADATA, SUPPORTED_SYMBOLS, COINGECKO_IDS, coingecko_id  # noqa: F401
from .fees import effective_price, effective_spread, fee_adjusted_quote, to_bps, PricedQuote  # noqa: F401

__all__ = [
    "Venue",
    "VenueStatus",
    "VenueRegistry",
    "FeeQuote",
    "RateLimit",
    "default_registry",
    "SymbolMapper",
    "SYMBOL_CONFIG",
    "VENUE_METADATA",
    "SUPPORTED_SYMBOLS",
    "COINGECKO_IDS",
    "coingecko_id",
    "effective_price",
    "effective_spread",
    "fee_adjusted_quote",
    "to_bps",
    "PricedQuote",
]
