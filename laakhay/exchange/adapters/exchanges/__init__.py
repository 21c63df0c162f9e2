"""Exchange-specific adapters."""

from .binance import BinanceAdapter, BinanceFuturesAdapter
from .bitmex import BitmexAdapter
from .kucoin import KucoinAdapter

__all__ = [
    "BinanceAdapter",
    "BinanceFuturesAdapter",
    "BitmexAdapter",
    "KucoinAdapter",
]
