"""Laakhay Exchange - exchange abstraction core for trading platforms."""

from .adapters import (
    CcxtExchangeAdapter,
    ExchangeAdapter,
    OrderManager,
    PaperTradeAdapter,
    create_adapter,
    get_adapter_registry,
)
from .config import DispatchSettings, LaakhayExchangeSettings, get_settings
from .core import (
    AuthConfigError,
    AuthenticationError,
    ConfigurationError,
    ContractKind,
    ExchangeCapabilities,
    ExchangeCoreError,
    ExchangeError,
    ExchangeType,
    ExtraOrderParams,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidFormatError,
    InvalidOrderError,
    MarketNotFoundError,
    NetworkError,
    NotSupportedError,
    OrderNotFoundError,
    OrderSide,
    OrderStatus,
    OrderType,
    RateLimitExceededError,
    RequestTimeoutError,
    SymbolNotFoundError,
    UpstreamError,
    get_capabilities,
    resolve_exchange_id,
)
from .dispatch import (
    ClockSkewWindows,
    DispatchMode,
    HttpFunctionInvoker,
    ProxyEndpoint,
    ProxyPool,
    RelayDispatcher,
    dispatch_function_relay,
    prepare_retry_pair,
    select_proxy,
)
from .handlers import ContractHandler, InverseContractHandler, handler_for
from .markets import (
    CcxtMarketSource,
    InMemoryMarketCache,
    MarketEncoder,
    MarketIndex,
    get_encoder_registry,
)
from .models import Balance, ExchangeOrder, Market, MarketLimits, Position

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Adapters
    "ExchangeAdapter",
    "CcxtExchangeAdapter",
    "PaperTradeAdapter",
    "OrderManager",
    "create_adapter",
    "get_adapter_registry",
    # Configuration
    "DispatchSettings",
    "LaakhayExchangeSettings",
    "get_settings",
    "ExchangeCapabilities",
    "get_capabilities",
    "resolve_exchange_id",
    # Enums and params
    "ContractKind",
    "ExchangeType",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "ExtraOrderParams",
    # Dispatch
    "ClockSkewWindows",
    "DispatchMode",
    "HttpFunctionInvoker",
    "ProxyEndpoint",
    "ProxyPool",
    "RelayDispatcher",
    "dispatch_function_relay",
    "prepare_retry_pair",
    "select_proxy",
    # Markets
    "CcxtMarketSource",
    "InMemoryMarketCache",
    "MarketEncoder",
    "MarketIndex",
    "get_encoder_registry",
    # Handlers
    "ContractHandler",
    "InverseContractHandler",
    "handler_for",
    # Models
    "Balance",
    "ExchangeOrder",
    "Market",
    "MarketLimits",
    "Position",
    # Exceptions
    "ExchangeCoreError",
    "SymbolNotFoundError",
    "MarketNotFoundError",
    "ExchangeError",
    "AuthenticationError",
    "InsufficientFundsError",
    "InvalidAddressError",
    "InvalidFormatError",
    "InvalidOrderError",
    "NetworkError",
    "OrderNotFoundError",
    "RateLimitExceededError",
    "RequestTimeoutError",
    "UpstreamError",
    "NotSupportedError",
    "AuthConfigError",
    "ConfigurationError",
]
