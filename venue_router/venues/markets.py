"""Market configuration: which venues quote which symbol, and under what name.

Defaults mirror the venues the fetch adapters know about. ``Settings`` may
override both tables; the mapper keeps the lookups in one place.
"""
from __future__ import annotations
from typing import Dict, List, Optional

VENUE_METADATA: Dict[str, Dict[str, str]] = {
    "binance": {"label": "Binance"},
    "kraken": {"label": "Kraken"},
    "okx": {"label": "OKX"},
    "gateio": {"label": "Gate.io"},
}

SYMBOL_CONFIG: Dict[str, Dict[str, str]] = {
    "BTC/USDT": {"binance": "BTCUSDT", "kraken": "XBTUSDT", "okx": "BTC-USDT", "gateio": "BTC_USDT"},
    "ETH/USDT": {"binance": "ETHUSDT", "kraken": "ETHUSDT", "okx": "ETH-USDT", "gateio": "ETH_USDT"},
    "SOL/USDT": {"binance": "SOLUSDT", "kraken": "SOLUSDT", "okx": "SOL-USDT", "gateio": "SOL_USDT"},
    "ADA/USDT": {"binance": "ADAUSDT", "kraken": "ADAUSDT", "okx": "ADA-USDT", "gateio": "ADA_USDT"},
}

SUPPORTED_SYMBOLS: List[str] = list(SYMBOL_CONFIG.keys())

# base asset -> CoinGecko coin id, for USD reference prices
COINGECKO_IDS: Dict[str, str] = {
    "BTC": "bitcoin",
    "XBT": "bitcoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "ADA": "cardano",
}


def coingecko_id(symbol: str) -> Optional[str]:
    """Coin id for an internal (BTC/USDT) or venue-native (BTCUSDT, BTC-USDT) symbol."""
    compact = symbol.upper().replace("/", "").replace("-", "").replace("_", "")
    for base, coin in COINGECKO_IDS.items():
        if compact.startswith(base):
            return coin
    return None


class SymbolMapper:
    def __init__(
        self,
        mapping: Dict[str, Dict[str, str]] | None = None,
        labels: Dict[str, Dict[str, str]] | None = None,
    ):
        self._map = {k: dict(v) for k, v in (mapping if mapping is not None else SYMBOL_CONFIG).items()}
        self._labels = {k: dict(v) for k, v in (labels if labels is not None else VENUE_METADATA).items()}

    @property
    def symbols(self) -> List[str]:
        return list(self._map.keys())

    def is_supported(self, symbol: str) -> bool:
        return symbol in self._map

    def venues_for(self, symbol: str) -> Dict[str, str]:
        """venue_id -> venue-native symbol, in configuration order."""
        return dict(self._map.get(symbol, {}))

    def label(self, venue_id: str) -> Optional[str]:
        meta = self._labels.get(venue_id)
        return meta.get("label") if meta else None

    def resolve_venue(self, text: Optional[str]) -> Optional[str]:
        """Match a venue id or display label, case-insensitively."""
        if not text:
            return None
        needle = text.strip().lower()
        for vid in self._labels:
            if vid.lower() == needle:
                return vid
        for vid, meta in self._labels.items():
            if (meta.get("label") or "").lower() == needle:
                return vid
        return None


__all__ = ["VENUE_METADATA", "SYMBOL_CONFIG", "SUPPORTED_SYMBOLS", "COINGECKO_IDS", "coingecko_id", "SymbolMapper"]
