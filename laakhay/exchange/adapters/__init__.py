"""Uniform exchange adapters over ccxt, plus the paper-trade decorator."""

from .base import ExchangeAdapter
from .ccxt import CcxtExchangeAdapter
from .clients import CLIENT_CLASSES, build_client
from .exchanges import BinanceAdapter, BinanceFuturesAdapter, BitmexAdapter, KucoinAdapter
from .paper import DEFAULT_PAPER_LEVERAGE, OrderManager, PaperTradeAdapter
from .registry import AdapterRegistration, AdapterRegistry, create_adapter, get_adapter_registry

__all__ = [
    "CLIENT_CLASSES",
    "DEFAULT_PAPER_LEVERAGE",
    "AdapterRegistration",
    "AdapterRegistry",
    "BinanceAdapter",
    "BinanceFuturesAdapter",
    "BitmexAdapter",
    "CcxtExchangeAdapter",
    "ExchangeAdapter",
    "KucoinAdapter",
    "OrderManager",
    "PaperTradeAdapter",
    "build_client",
    "create_adapter",
    "get_adapter_registry",
]
