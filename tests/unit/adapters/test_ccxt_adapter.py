"""Unit tests for the generic ccxt adapter."""

import ccxt
import pytest

from laakhay.exchange.adapters import CcxtExchangeAdapter
from laakhay.exchange.core import (
    ExchangeCapabilities,
    ExtraOrderParams,
    InsufficientFundsError,
    NotSupportedError,
    OrderNotFoundError,
    OrderType,
)
from laakhay.exchange.handlers import ContractHandler
from laakhay.exchange.markets import BinanceMarketEncoder


@pytest.fixture
def adapter(client):
    return CcxtExchangeAdapter("ascendex", client)


@pytest.mark.asyncio
async def test_ccxt_errors_are_translated(adapter, client):
    """Protocol errors surface as ExchangeError subclasses with the cause kept."""
    client.fetch_order.side_effect = ccxt.OrderNotFound("ascendex order 1 not found")

    with pytest.raises(OrderNotFoundError) as exc_info:
        await adapter.order_info("1", "BTC/USDT")
    assert exc_info.value.exchange == "ascendex"
    assert isinstance(exc_info.value.__cause__, ccxt.OrderNotFound)


@pytest.mark.asyncio
async def test_create_market_order_drops_price(adapter, client):
    client.create_order.return_value = {"id": "7", "type": "market", "side": "sell", "status": "closed"}
    order = await adapter.create_order("BTC/USDT", "market", "SELL", 0.5, 30000.0)

    client.create_order.assert_awaited_once_with("BTC/USDT", "market", "sell", 0.5, None, {})
    assert order.id == "7"
    assert order.type == OrderType.MARKET
    assert order.status.value == "closed"


@pytest.mark.asyncio
async def test_create_order_passes_client_order_id(adapter, client):
    params = ExtraOrderParams().with_client_order_id("abc")
    await adapter.create_order("BTC/USDT", "limit", "buy", 1.0, 100.0, params)
    assert client.create_order.await_args.args[-1] == {"clientOrderId": "abc"}


@pytest.mark.asyncio
async def test_unknown_order_type_keeps_raw_spelling(adapter, client):
    client.fetch_order.return_value = {"id": "3", "type": "TRAILING_STOP_MARKET"}
    order = await adapter.order_info("3")
    assert order.type is None
    assert order.raw_type == "TRAILING_STOP_MARKET"


@pytest.mark.asyncio
async def test_order_lists_are_parsed(adapter, client):
    client.fetch_open_orders.return_value = [{"id": "1", "status": "open"}, {"id": "2", "status": "open"}]
    orders = await adapter.open_orders("BTC/USDT")
    assert [order.id for order in orders] == ["1", "2"]
    client.fetch_open_orders.assert_awaited_once_with("BTC/USDT", None, None)


@pytest.mark.asyncio
async def test_balance_and_withdraw(adapter, client):
    client.fetch_balance.return_value = {"free": {"USDT": 10}, "used": {"USDT": None}, "total": {"USDT": 10}}
    balance = await adapter.fetch_balance()
    assert balance.free_of("USDT") == 10.0
    assert balance.free_of("BTC") == 0.0

    client.withdraw.side_effect = ccxt.InsufficientFunds("not enough")
    with pytest.raises(InsufficientFundsError):
        await adapter.withdraw("USDT", 100.0, "0xabc", network="ERC20")
    client.withdraw.assert_awaited_once_with("USDT", 100.0, "0xabc", None, {"network": "ERC20"})


@pytest.mark.asyncio
async def test_deposit_address(adapter, client):
    client.fetch_deposit_address.return_value = {"address": "0xabc", "tag": None, "network": "ERC20"}
    address = await adapter.deposit_address("USDT", "ERC20")
    assert address.currency == "USDT"
    assert address.address == "0xabc"
    client.fetch_deposit_address.assert_awaited_once_with("USDT", {"network": "ERC20"})


def test_find_symbol_format_agnostic(adapter):
    """Market ids, unified symbols and unknowns are all handled."""
    assert adapter.find_symbol_format_agnostic("BTCUSDT")["symbol"] == "BTC/USDT"
    assert adapter.find_symbol_format_agnostic("BTC/USDT")["id"] == "BTCUSDT"
    assert adapter.find_symbol_format_agnostic("NOPE") is None


@pytest.mark.asyncio
async def test_find_symbol_via_encoder(client, binance_source):
    """Internal ids fall back to the encoder's native symbol."""
    client.markets_by_id = {}
    encoder = BinanceMarketEncoder(binance_source)
    await encoder.load_index()
    adapter = CcxtExchangeAdapter("binance", client, encoder)

    assert adapter.find_symbol_format_agnostic("BTCUSDT")["symbol"] == "BTC/USDT"
    assert isinstance(adapter.handler, ContractHandler)


def test_set_auth_and_precision(adapter, client):
    client.amount_to_precision.return_value = "0.123"
    adapter.set_auth("key", "secret")

    assert client.apiKey == "key"
    assert client.secret == "secret"
    assert client.password == ""
    assert adapter.amount_to_precision("BTC/USDT", 0.12345) == 0.123


@pytest.mark.asyncio
async def test_futures_operations_not_supported_by_default(adapter):
    with pytest.raises(NotSupportedError, match="ascendex"):
        await adapter.positions()
    with pytest.raises(NotSupportedError):
        await adapter.income()
    with pytest.raises(NotSupportedError, match="Leverage"):
        await adapter.leverage("BTC/USDT")
    with pytest.raises(NotSupportedError, match="Margin mode"):
        await adapter.set_margin_mode("BTC/USDT", "isolated")
    assert adapter.leverage_for_cross_margin() == 1.0


def test_margin_mode_support_follows_capabilities(client):
    assert not CcxtExchangeAdapter("ascendex", client).supports_margin_mode()
    flagged = CcxtExchangeAdapter("x", client, capabilities=ExchangeCapabilities(supports_margin_mode=True))
    assert flagged.supports_margin_mode()


@pytest.mark.asyncio
async def test_context_manager_closes_client(adapter, client):
    async with adapter:
        pass
    client.close.assert_awaited_once()
