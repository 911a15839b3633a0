"""Public exchange ticker adapters (REST).

Each adapter exposes ``async fetch_ticker(venue_symbol) -> RawQuote`` and raises
``ExchangeFetchError`` (venue id + optional HTTP status) when the venue is
unreachable, answers non-2xx, or returns a bid/ask that is not a finite
positive number. ``ExchangeFetcher`` is the uniform entry point the quote
cache calls.
"""

from .errors import ExchangeFetchError
from .http import HTTPClient, AsyncTokenBucket
from .kraken import KrakenAdapter
from .okx import OKXAdapter
from .gateio import GateioAdapter
from .binance import BinanceAdapter
from .coingecko import CoinGeckoClient
from .fetcher import ExchangeFetcher, build_fetcher

__all__ = [
    'ExchangeFetchError', 'HTTPClient', 'AsyncTokenBucket', 'KrakenAdapter', 'OKXAdapter',
    'GateioAdapter', 'BinanceAdapter', 'CoinGeckoClient', 'ExchangeFetcher', 'build_fetcher',
]
