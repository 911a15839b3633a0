"""Venue comparison and routing engine.

Pipeline: per-venue fetch (through ``QuoteCache``) -> ``VenueComparator``
ranks by fee-adjusted mid -> ``SnapshotAggregator`` records a history point
-> ``RouteSimulator`` adds side-aware best-route and savings math.
``RouterService`` wires the shared pieces together.
"""

from .types import *
from .comparator import VenueComparator
from .cache import QuoteCache, DEFAULT_TTL_MS
from .history import HistoryStore, HISTORY_LIMIT
from .aggregator import SnapshotAggregator
from .router import RouteSimulator, compute_savings
from .service import RouterService, get_default_service

__all__ = [
    "RawQuote",
    "VenueComparison",
    "HistoryPoint",
    "VenueQuoteStatus",
    "SymbolSnapshot",
    "RouteRequest",
    "RouteQuote",
    "RouteSimulationResult",
    "UnsupportedSymbolError",
    "InvalidRouteRequest",
    "VenueComparator",
    "QuoteCache",
    "DEFAULT_TTL_MS",
    "HistoryStore",
    "HISTORY_LIMIT",
    "SnapshotAggregator",
    "RouteSimulator",
    "compute_savings",
    "RouterService",
    "get_default_service",
]
