"""Unit tests for exchange name resolution."""

import pytest

from laakhay.exchange.core import (
    ConfigurationError,
    ExchangeType,
    canonical_name,
    client_id,
    price_exchange,
    resolve_exchange_id,
)


@pytest.mark.parametrize(
    ("name", "exchange_type", "expected"),
    [
        ("Binance", ExchangeType.SPOT, "binance"),
        ("Binance", ExchangeType.FUTURES, "binancefutures"),
        ("binance", "futures", "binancefutures"),
        ("Zignaly", ExchangeType.SPOT, "binance"),
        ("ZignalyFutures", ExchangeType.SPOT, "binancefutures"),
        ("Zignaly", ExchangeType.FUTURES, "binancefutures"),
        ("BitMEX", ExchangeType.FUTURES, "bitmex"),
        (" KuCoin ", ExchangeType.SPOT, "kucoin"),
    ],
)
def test_resolve_exchange_id(name, exchange_type, expected):
    """Platform names normalize onto registry ids."""
    assert resolve_exchange_id(name, exchange_type) == expected


@pytest.mark.parametrize("name", [None, "", "   "])
def test_resolve_exchange_id_requires_name(name):
    """Empty names are configuration errors."""
    with pytest.raises(ConfigurationError, match="Exchange name is required"):
        resolve_exchange_id(name)


def test_resolve_exchange_id_rejects_unknown_type():
    """Account types outside spot/futures are rejected."""
    with pytest.raises(ConfigurationError, match="Unknown exchange type"):
        resolve_exchange_id("Binance", "margin")


def test_brokerage_aliases_share_prices():
    """Brokerage names price off the exchange they route to."""
    assert price_exchange("zignaly") == "Binance"
    assert price_exchange("ZignalyFutures") == "BinanceFutures"
    assert client_id("BinanceFutures") == "binanceusdm"
    assert canonical_name("bitmex") == "BitMEX"


def test_canonical_name_unknown():
    """Unknown names raise instead of guessing."""
    with pytest.raises(ConfigurationError, match="Unknown exchange"):
        canonical_name("mtgox")
