"""Exchange-specific market encoders."""

from .ascendex import AscendexMarketEncoder
from .binance import BinanceFuturesMarketEncoder, BinanceMarketEncoder
from .bitmex import BitmexMarketEncoder
from .kucoin import KucoinMarketEncoder
from .vcce import VcceMarketEncoder

__all__ = [
    "AscendexMarketEncoder",
    "BinanceFuturesMarketEncoder",
    "BinanceMarketEncoder",
    "BitmexMarketEncoder",
    "KucoinMarketEncoder",
    "VcceMarketEncoder",
]
