"""Unit tests for the encoder registry."""

import pytest

from laakhay.exchange.core import ConfigurationError
from laakhay.exchange.markets import (
    BinanceFuturesMarketEncoder,
    BinanceMarketEncoder,
    EncoderRegistry,
    get_encoder_registry,
)


def test_builtin_encoders_registered():
    registry = get_encoder_registry()
    assert registry.list_exchanges() == [
        "ascendex",
        "binance",
        "binancefutures",
        "bitmex",
        "kucoin",
        "vcce",
    ]


def test_create_resolves_platform_names(binance_source):
    """Brokerage names and account types pick the right encoder."""
    registry = get_encoder_registry()
    assert type(registry.create("Zignaly", binance_source)) is BinanceMarketEncoder
    encoder = registry.create("Binance", binance_source, exchange_type="futures")
    assert type(encoder) is BinanceFuturesMarketEncoder


def test_unknown_exchange_is_configuration_error(binance_source):
    """No reflection fallback for unknown names."""
    with pytest.raises(ConfigurationError, match="No market encoder registered"):
        get_encoder_registry().create("MtGox", binance_source)


def test_duplicate_registration_rejected():
    registry = EncoderRegistry()
    registry.register("binance", BinanceMarketEncoder)
    with pytest.raises(ConfigurationError, match="already registered"):
        registry.register("Binance", BinanceMarketEncoder)
    registry.unregister("binance")
    assert not registry.is_registered("binance")
