"""Custom exception hierarchy.

Callers need to tell four situations apart: the instrument is unknown, the
exchange rejected the call, our dispatch infrastructure failed, or the
operation is not supported here. Each has its own branch below.

Architecture:
    - ExchangeCoreError: base for everything raised by this library
    - SymbolNotFoundError / MarketNotFoundError: lookup failures
    - ExchangeError (+ subclasses): upstream exchange rejected the call
    - UpstreamError: relay/function dispatch failed or answered garbage
    - NotSupportedError: capability intentionally missing for the adapter
    - AuthConfigError / ConfigurationError: static setup problems
"""

from __future__ import annotations


class ExchangeCoreError(Exception):
    """Base exception for all library errors."""

    pass


class SymbolNotFoundError(ExchangeCoreError):
    """Internal or native symbol has no mapping on the exchange."""

    def __init__(
        self,
        message: str,
        *,
        exchange: str | None = None,
        value: str | None = None,
    ) -> None:
        super().__init__(message)
        self.exchange = exchange
        self.value = value


class MarketNotFoundError(ExchangeCoreError):
    """Market metadata is absent from the current cache snapshot.

    Callers may retry after a forced reload of the market index.
    """

    def __init__(
        self,
        message: str,
        *,
        exchange: str | None = None,
        value: str | None = None,
    ) -> None:
        super().__init__(message)
        self.exchange = exchange
        self.value = value


class ExchangeError(ExchangeCoreError):
    """Upstream exchange or its transport rejected the call.

    The original protocol-client exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        exchange: str | None = None,
        code: str | int | None = None,
    ) -> None:
        super().__init__(message)
        self.exchange = exchange
        self.code = code


class AuthenticationError(ExchangeError):
    """Exchange refused the credentials."""

    pass


class InsufficientFundsError(ExchangeError):
    """Not enough balance for the requested operation."""

    pass


class InvalidAddressError(ExchangeError):
    """Deposit or withdrawal address was rejected."""

    pass


class OrderNotFoundError(ExchangeError):
    """Exchange does not know the referenced order."""

    pass


class InvalidOrderError(ExchangeError):
    """Order parameters were rejected by the exchange."""

    pass


class InvalidFormatError(ExchangeError):
    """Request was malformed or the response could not be parsed."""

    pass


class RequestTimeoutError(ExchangeError):
    """Exchange did not answer in time."""

    pass


class RateLimitExceededError(ExchangeError):
    """Exchange throttled the call."""

    pass


class NetworkError(ExchangeError):
    """Transport level failure talking to the exchange."""

    pass


class UpstreamError(ExchangeCoreError):
    """Relay or function invocation failed, or returned a malformed envelope."""

    def __init__(
        self,
        message: str,
        *,
        relay: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.relay = relay
        self.status_code = status_code


class NotSupportedError(ExchangeCoreError, NotImplementedError):
    """Operation intentionally unsupported by this adapter or mode."""

    def __init__(self, message: str, *, exchange: str | None = None) -> None:
        super().__init__(message)
        self.exchange = exchange


class AuthConfigError(ExchangeCoreError):
    """Required credentials (e.g. partner id/key) are missing."""

    def __init__(self, message: str, *, exchange: str | None = None) -> None:
        super().__init__(message)
        self.exchange = exchange


class ConfigurationError(ExchangeCoreError):
    """Static configuration is invalid or names an unknown exchange."""

    pass
