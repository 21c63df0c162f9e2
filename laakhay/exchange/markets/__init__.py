"""Market encoding: cache, index, encoders and sources."""

from .cache import InMemoryMarketCache, MarketCacheStore, index_key, markets_key
from .encoder import MarketEncoder, parse_limits, strip_symbol
from .encoders import (
    AscendexMarketEncoder,
    BinanceFuturesMarketEncoder,
    BinanceMarketEncoder,
    BitmexMarketEncoder,
    KucoinMarketEncoder,
    VcceMarketEncoder,
)
from .index import MarketIndex
from .registry import EncoderRegistry, get_encoder_registry
from .source import CcxtMarketSource, MarketSource

__all__ = [
    "AscendexMarketEncoder",
    "BinanceFuturesMarketEncoder",
    "BinanceMarketEncoder",
    "BitmexMarketEncoder",
    "CcxtMarketSource",
    "EncoderRegistry",
    "InMemoryMarketCache",
    "KucoinMarketEncoder",
    "MarketCacheStore",
    "MarketEncoder",
    "MarketIndex",
    "MarketSource",
    "VcceMarketEncoder",
    "get_encoder_registry",
    "index_key",
    "markets_key",
    "parse_limits",
    "strip_symbol",
]
