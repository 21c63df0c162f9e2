"""Unit tests for the adapter registry and factory."""

import pytest

from laakhay.exchange.adapters import (
    AdapterRegistry,
    BinanceAdapter,
    BinanceFuturesAdapter,
    BitmexAdapter,
    CcxtExchangeAdapter,
    PaperTradeAdapter,
    build_client,
    create_adapter,
    get_adapter_registry,
)
from laakhay.exchange.adapters.clients import BinanceUsdmClient, KucoinClient
from laakhay.exchange.config import DispatchSettings, LaakhayExchangeSettings
from laakhay.exchange.core import ConfigurationError
from laakhay.exchange.dispatch import DispatchMode, ProxyEndpoint
from laakhay.exchange.handlers import InverseContractHandler


class MockOrderManager:
    async def create_order(self, *args):
        raise AssertionError("not used")

    async def order_status(self, *args):
        raise AssertionError("not used")

    async def orders(self, *args):
        return []

    async def cancel_order(self, *args):
        raise AssertionError("not used")

    async def fetch_balance(self):
        raise AssertionError("not used")


@pytest.fixture
def settings():
    return LaakhayExchangeSettings(broker_ids={"binance": "x-BRK"})


def test_builtin_adapters_registered():
    assert get_adapter_registry().list_exchanges() == [
        "ascendex",
        "binance",
        "binancefutures",
        "bitmex",
        "kucoin",
    ]


def test_registry_rejects_duplicates_and_unknowns():
    registry = AdapterRegistry()
    registry.register("binance", BinanceAdapter, "binance")
    with pytest.raises(ConfigurationError, match="already registered"):
        registry.register("BINANCE", BinanceAdapter, "binance")
    with pytest.raises(ConfigurationError, match="No exchange adapter registered"):
        registry.registration("bitmex")


def test_create_adapter_unknown_exchange(settings):
    with pytest.raises(ConfigurationError):
        create_adapter("MtGox", settings=settings)


def test_build_client_unknown_id():
    with pytest.raises(ConfigurationError, match="No protocol client"):
        build_client("mtgox")


@pytest.mark.asyncio
async def test_create_binance_futures_adapter(settings):
    """Brokerage names resolve and the client gets the dispatcher."""
    adapter = create_adapter("Zignaly", "futures", api_key="key", secret="secret", settings=settings)
    try:
        assert isinstance(adapter, BinanceFuturesAdapter)
        assert adapter.id == "binancefutures"
        assert isinstance(adapter.client, BinanceUsdmClient)
        assert adapter.client.apiKey == "key"
        assert adapter.client.relay_dispatcher.mode == DispatchMode.DIRECT
        assert adapter.client.relay_dispatcher.clock_skew_retry
        assert adapter.broker_id is None
    finally:
        await adapter.close()


@pytest.mark.asyncio
async def test_broker_id_from_settings(settings):
    adapter = create_adapter("Binance", settings=settings)
    try:
        assert type(adapter) is BinanceAdapter
        assert adapter.broker_id == "x-BRK"
    finally:
        await adapter.close()


@pytest.mark.asyncio
async def test_bitmex_adapter_gets_inverse_handler(settings):
    adapter = create_adapter("BitMEX", "futures", settings=settings)
    try:
        assert isinstance(adapter, BitmexAdapter)
        assert isinstance(adapter.handler, InverseContractHandler)
        assert adapter.leverage_for_cross_margin() == 0.0
    finally:
        await adapter.close()


@pytest.mark.asyncio
async def test_kucoin_partner_credentials():
    settings = LaakhayExchangeSettings(kucoin_partner_id="partner", kucoin_partner_key="pkey")
    adapter = create_adapter("KuCoin", settings=settings)
    try:
        assert isinstance(adapter.client, KucoinClient)
        assert adapter.client.partner_id == "partner"
        assert adapter.client.partner_key == "pkey"
    finally:
        await adapter.close()


@pytest.mark.asyncio
async def test_ascendex_uses_generic_adapter(settings):
    adapter = create_adapter("AscendEX", settings=settings)
    try:
        assert type(adapter) is CcxtExchangeAdapter
        assert not adapter.supports_margin_mode()
    finally:
        await adapter.close()


@pytest.mark.asyncio
async def test_paper_wrapper(settings):
    adapter = create_adapter("Binance", settings=settings, order_manager=MockOrderManager())
    try:
        assert isinstance(adapter, PaperTradeAdapter)
        assert await adapter.leverage("BTC/USDT") == {"BTC/USDT": {"leverage": 20}}
    finally:
        await adapter.close()


def test_function_mode_without_invoker():
    settings = LaakhayExchangeSettings(
        dispatch=DispatchSettings(
            mode=DispatchMode.FUNCTION,
            function_ranges=[ProxyEndpoint(url_template="relay-{index}", index_min=1, index_max=2)],
        )
    )
    with pytest.raises(ConfigurationError, match="invoker"):
        create_adapter("Binance", settings=settings)
