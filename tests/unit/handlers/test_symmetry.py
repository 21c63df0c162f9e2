"""Sizing round trips for linear and inverse contracts."""

import pytest

from laakhay.exchange.core import get_capabilities
from laakhay.exchange.handlers import ContractHandler, InverseContractHandler
from laakhay.exchange.markets import BinanceMarketEncoder, BitmexMarketEncoder


@pytest.mark.parametrize(
    ("encoder_cls", "handler_cls", "exchange", "source_fixture", "symbol"),
    [
        (BinanceMarketEncoder, ContractHandler, "binance", "binance_source", "BTCUSDT"),
        (BitmexMarketEncoder, InverseContractHandler, "bitmex", "bitmex_source", "XBTUSD"),
    ],
    ids=["linear", "inverse"],
)
@pytest.mark.asyncio
async def test_amount_survives_position_size_round_trip(
    request, encoder_cls, handler_cls, exchange, source_fixture, symbol
):
    """amount -> position size -> amount returns the original amount."""
    encoder = encoder_cls(request.getfixturevalue(source_fixture))
    await encoder.load_index()
    handler = handler_cls(encoder, get_capabilities(exchange))

    position_size = handler.position_size(symbol, 3.5, 27000.0)
    assert handler.amount_from_position_size(symbol, position_size, 27000.0) == pytest.approx(3.5)
