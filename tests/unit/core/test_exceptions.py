"""Unit tests for the exception hierarchy.

Tests focus on meaningful behavior, not just field access.
"""

import ccxt
import pytest

from laakhay.exchange.core import (
    AuthenticationError,
    ExchangeCoreError,
    ExchangeError,
    InsufficientFundsError,
    InvalidFormatError,
    InvalidOrderError,
    NetworkError,
    NotSupportedError,
    OrderNotFoundError,
    RateLimitExceededError,
    RequestTimeoutError,
    SymbolNotFoundError,
    UpstreamError,
)
from laakhay.exchange.utils.ccxt import extract_error_code, translate_ccxt_error


def test_symbol_not_found_error_with_context():
    """Test SymbolNotFoundError carries exchange and value."""
    error = SymbolNotFoundError("Symbol NOPE not found", exchange="Binance", value="NOPE")
    assert error.exchange == "Binance"
    assert error.value == "NOPE"
    assert isinstance(error, ExchangeCoreError)


def test_upstream_error_is_not_exchange_error():
    """Relay failures must stay distinguishable from exchange rejections."""
    error = UpstreamError("relay down", relay="fn-3")
    assert error.relay == "fn-3"
    assert not isinstance(error, ExchangeError)


def test_not_supported_error_is_not_implemented_error():
    """NotSupportedError can be caught as NotImplementedError."""
    with pytest.raises(NotImplementedError):
        raise NotSupportedError("positions", exchange="binance")


@pytest.mark.parametrize(
    ("ccxt_error", "expected"),
    [
        (ccxt.AuthenticationError, AuthenticationError),
        (ccxt.InsufficientFunds, InsufficientFundsError),
        (ccxt.OrderNotFound, OrderNotFoundError),
        (ccxt.InvalidOrder, InvalidOrderError),
        (ccxt.BadRequest, InvalidFormatError),
        (ccxt.RequestTimeout, RequestTimeoutError),
        (ccxt.RateLimitExceeded, RateLimitExceededError),
        (ccxt.NetworkError, NetworkError),
        (ccxt.ExchangeError, ExchangeError),
    ],
)
def test_translate_ccxt_error_picks_most_specific_class(ccxt_error, expected):
    """Subclass ccxt errors map to their own class, not a parent's."""
    translated = translate_ccxt_error(ccxt_error("boom"), exchange="binance")
    assert type(translated) is expected
    assert translated.exchange == "binance"


def test_translate_ccxt_error_extracts_code():
    """Exchange error codes embedded in the message are kept."""
    exc = ccxt.InsufficientFunds('binance {"code":-2010,"msg":"Account has insufficient balance"}')
    translated = translate_ccxt_error(exc)
    assert translated.code == "-2010"


def test_extract_error_code_without_code():
    """Messages without a code yield None."""
    assert extract_error_code("plain failure") is None
