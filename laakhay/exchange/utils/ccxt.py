"""Helpers around the ccxt protocol client."""

from __future__ import annotations

import re

import ccxt

from ..core.exceptions import (
    AuthenticationError,
    ExchangeError,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidFormatError,
    InvalidOrderError,
    NetworkError,
    OrderNotFoundError,
    RateLimitExceededError,
    RequestTimeoutError,
)

# Most specific first: ccxt exceptions inherit from each other
# (OrderNotFound < InvalidOrder, RequestTimeout/RateLimitExceeded < NetworkError)
_ERROR_MAP: tuple[tuple[type[Exception], type[ExchangeError]], ...] = (
    (ccxt.AuthenticationError, AuthenticationError),
    (ccxt.InsufficientFunds, InsufficientFundsError),
    (ccxt.InvalidAddress, InvalidAddressError),
    (ccxt.OrderNotFound, OrderNotFoundError),
    (ccxt.InvalidOrder, InvalidOrderError),
    (ccxt.ArgumentsRequired, InvalidFormatError),
    (ccxt.BadRequest, InvalidFormatError),
    (ccxt.BadResponse, InvalidFormatError),
    (ccxt.RequestTimeout, RequestTimeoutError),
    (ccxt.RateLimitExceeded, RateLimitExceededError),
    (ccxt.DDoSProtection, RateLimitExceededError),
    (ccxt.NetworkError, NetworkError),
)

_CODE_PATTERN = re.compile(r'"code"\s*:\s*"?(-?\w+)"?')


def extract_error_code(message: str) -> str | None:
    """Pull the exchange error code out of a ccxt message, if any.

    Examples:
        >>> extract_error_code('binance {"code":-2010,"msg":"Account has insufficient balance"}')
        '-2010'
    """
    match = _CODE_PATTERN.search(message)
    return match.group(1) if match else None


def translate_ccxt_error(exc: Exception, *, exchange: str | None = None) -> ExchangeError:
    """Map a ccxt exception onto the ``ExchangeError`` hierarchy.

    The caller is expected to ``raise translate_ccxt_error(exc) from exc``.
    """
    message = str(exc)
    code = extract_error_code(message)
    for ccxt_class, error_class in _ERROR_MAP:
        if isinstance(exc, ccxt_class):
            return error_class(message, exchange=exchange, code=code)
    return ExchangeError(message, exchange=exchange, code=code)
