"""Unit tests for the KuCoin adapter."""

import pytest

from laakhay.exchange.adapters import KucoinAdapter
from laakhay.exchange.core import ExtraOrderParams, InvalidFormatError, OrderType


@pytest.fixture
def adapter(client):
    return KucoinAdapter("kucoin", client)


@pytest.mark.asyncio
async def test_stop_limit_requires_stop_price(adapter, client):
    with pytest.raises(InvalidFormatError, match="Stop price not set"):
        await adapter.create_order("BTC/USDT", "stop-limit", "buy", 1.0, 100.0)
    client.create_order.assert_not_awaited()


@pytest.mark.asyncio
async def test_stop_limit_is_sent_as_limit(adapter, client):
    """The stop direction follows the side; the requested type is reported."""
    params = ExtraOrderParams(stop_price=99.0, client_order_id="sig")
    order = await adapter.create_order("BTC/USDT", "stop-limit", "sell", 1.0, 98.0, params)

    _, order_type, side, _, price, ccxt_params = client.create_order.await_args.args
    assert order_type == "limit"
    assert price == 98.0
    assert ccxt_params["stopPrice"] == 99.0
    assert ccxt_params["stop"] == "loss"
    assert ccxt_params["clientOid"].startswith("sig")
    assert order.type == OrderType.STOP_LIMIT


@pytest.mark.asyncio
async def test_buy_stop_triggers_on_entry(adapter, client):
    await adapter.create_order("BTC/USDT", "limit", "buy", 1.0, 100.0, ExtraOrderParams(stop_price=101.0))
    assert client.create_order.await_args.args[-1]["stop"] == "entry"


@pytest.mark.asyncio
async def test_cancel_reports_order_state(adapter, client):
    client.cancel_order.return_value = {"id": "5", "info": {"cancelledOrderIds": ["5"]}}
    client.fetch_order.return_value = {"id": "5", "status": "canceled", "type": "limit"}

    order = await adapter.cancel_order("5", "BTC/USDT")

    client.cancel_order.assert_awaited_once_with("5", "BTC/USDT")
    assert order.status.value == "canceled"
