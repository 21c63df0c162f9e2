"""Core components."""

from .capabilities import (
    DEFAULT_CAPABILITIES,
    EXCHANGE_CAPABILITIES,
    ExchangeCapabilities,
    get_capabilities,
)
from .codes import canonical_name, client_id, price_exchange, resolve_exchange_id
from .enums import (
    ContractKind,
    ExchangeType,
    LimitBound,
    LimitKind,
    MarginMode,
    OrderSide,
    OrderStatus,
    OrderType,
    PositionSide,
    TimeInForce,
)
from .exceptions import (
    AuthConfigError,
    AuthenticationError,
    ConfigurationError,
    ExchangeCoreError,
    ExchangeError,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidFormatError,
    InvalidOrderError,
    MarketNotFoundError,
    NetworkError,
    NotSupportedError,
    OrderNotFoundError,
    RateLimitExceededError,
    RequestTimeoutError,
    SymbolNotFoundError,
    UpstreamError,
)
from .params import ExtraOrderParams

__all__ = [
    "DEFAULT_CAPABILITIES",
    "EXCHANGE_CAPABILITIES",
    "ExchangeCapabilities",
    "get_capabilities",
    "canonical_name",
    "client_id",
    "price_exchange",
    "resolve_exchange_id",
    "ContractKind",
    "ExchangeType",
    "LimitBound",
    "LimitKind",
    "MarginMode",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "PositionSide",
    "TimeInForce",
    "AuthConfigError",
    "AuthenticationError",
    "ConfigurationError",
    "ExchangeCoreError",
    "ExchangeError",
    "InsufficientFundsError",
    "InvalidAddressError",
    "InvalidFormatError",
    "InvalidOrderError",
    "MarketNotFoundError",
    "NetworkError",
    "NotSupportedError",
    "OrderNotFoundError",
    "RateLimitExceededError",
    "RequestTimeoutError",
    "SymbolNotFoundError",
    "UpstreamError",
    "ExtraOrderParams",
]
