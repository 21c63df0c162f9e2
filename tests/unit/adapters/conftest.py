"""Fixtures for adapter tests: a mocked ccxt client."""

from unittest.mock import AsyncMock, MagicMock

import pytest

ASYNC_METHODS = (
    "load_markets",
    "create_order",
    "cancel_order",
    "fetch_order",
    "fetch_orders",
    "fetch_open_orders",
    "fetch_closed_orders",
    "fetch_order_book",
    "fetch_balance",
    "fetch_deposit_address",
    "fetch_deposits",
    "fetch_withdrawals",
    "fetch_my_trades",
    "withdraw",
    "set_margin_mode",
    "close",
    "sapiPostFuturesTransfer",
    "sapiGetFuturesTransfer",
    "fapiPrivateV2GetPositionRisk",
    "fapiPrivateV2GetAccount",
    "fapiPrivateGetLeverageBracket",
    "fapiPrivatePostLeverage",
    "fapiPrivateGetIncome",
    "fapiPrivateGetForceOrders",
    "privateGetPosition",
    "privatePostPositionLeverage",
    "privatePostPositionIsolate",
    "privatePostPositionTransferMargin",
)


@pytest.fixture
def client():
    """ccxt client double: async endpoints are AsyncMocks, lookups are plain."""
    mock = MagicMock()
    for name in ASYNC_METHODS:
        setattr(mock, name, AsyncMock())
    mock.load_markets.return_value = {}
    mock.markets = {"BTC/USDT": {"id": "BTCUSDT", "symbol": "BTC/USDT"}}
    mock.markets_by_id = {"BTCUSDT": [{"id": "BTCUSDT", "symbol": "BTC/USDT"}]}
    mock.market_id.return_value = "BTCUSDT"
    mock.create_order.return_value = {"id": "1", "symbol": "BTC/USDT", "type": "limit", "side": "buy"}
    return mock
