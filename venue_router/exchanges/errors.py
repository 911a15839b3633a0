from __future__ import annotations
import math
from typing import Any, Optional, Tuple


class ExchangeFetchError(Exception):
    """A single venue could not produce a usable quote."""

    def __init__(self, venue_id: str, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.venue_id = venue_id
        self.status = status


def parse_top_of_book(venue_id: str, label: str, symbol: str, bid: Any, ask: Any) -> Tuple[float, float]:
    """Coerce bid/ask to floats; both must be finite and strictly positive."""
    try:
        b = float(bid)
        a = float(ask)
    except (TypeError, ValueError):
        raise ExchangeFetchError(venue_id, f"Invalid {label} data for {symbol}") from None
    if not (math.isfinite(b) and math.isfinite(a)) or b <= 0 or a <= 0:
        raise ExchangeFetchError(venue_id, f"Invalid {label} data for {symbol}")
    return b, a
