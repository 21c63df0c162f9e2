"""Unit tests for inverse and quanto contract arithmetic (BitMEX)."""

import pytest
import pytest_asyncio

from laakhay.exchange.core import get_capabilities
from laakhay.exchange.handlers import InverseContractHandler, powered_price
from laakhay.exchange.markets import BitmexMarketEncoder


@pytest_asyncio.fixture
async def handler(bitmex_source):
    encoder = BitmexMarketEncoder(bitmex_source)
    await encoder.load_index()
    return InverseContractHandler(encoder, get_capabilities("bitmex"))


def test_powered_price_clamps_infinities():
    assert powered_price(10000.0, -1) == pytest.approx(0.0001)
    assert powered_price(0.0, -1) == 0.0
    assert powered_price(2.0, 1) == 2.0


@pytest.mark.asyncio
async def test_inverse_position_size(handler):
    """100 contracts at 10000 are worth 0.01 XBT."""
    assert handler.position_size("XBTUSD", 100.0, 10000.0) == pytest.approx(0.01)
    assert handler.amount_from_position_size("XBTUSD", 0.01, 10000.0) == pytest.approx(100.0)
    assert handler.price_from_cost_amount("XBTUSD", 0.01, 100.0) == pytest.approx(10000.0)


@pytest.mark.asyncio
async def test_zero_price_returns_zero(handler):
    """A zero price never produces inf or raises."""
    assert handler.position_size("XBTUSD", 100.0, 0.0) == 0.0
    assert handler.order_cost("XBTUSD", 100.0, 0.0) == 0.0
    assert handler.price_from_cost_amount("XBTUSD", 0.01, 0.0) == 0.0


@pytest.mark.asyncio
async def test_quanto_uses_positive_power(handler):
    """Quanto value grows with price."""
    assert handler.position_size("ETHUSD", 10.0, 2000.0) == pytest.approx(2000.0 * 10 * 1e-6)


@pytest.mark.asyncio
async def test_current_profit_is_symmetric(handler):
    """Long and short unrealized profit mirror each other."""
    long_profit = handler.current_gross_profit("XBTUSD", False, 27000.0, 30000.0, 3.5)
    short_profit = handler.current_gross_profit("XBTUSD", True, 27000.0, 30000.0, 3.5)

    assert long_profit > 0
    assert short_profit == pytest.approx(-long_profit)
    expected = (1 / 27000.0 - 1 / 30000.0) * 3.5
    assert long_profit == pytest.approx(expected)


@pytest.mark.asyncio
async def test_gross_profit_short_on_falling_price(handler):
    profit = handler.gross_profit("XBTUSD", True, 30000.0, 27000.0, 1000.0, 1000.0)
    assert profit > 0


@pytest.mark.asyncio
async def test_funding_fee_sign_depends_on_side(handler):
    assert handler.funding_fee(0.001, True) == 0.001
    assert handler.funding_fee(0.001, False) == -0.001


@pytest.mark.asyncio
async def test_commission_is_already_settlement_asset(handler):
    assert handler.trade_commission("XBT", 0.0001, 30000.0, "USD") == 0.0001


@pytest.mark.asyncio
async def test_bitmex_inverse_limits_swap_amount_and_cost(handler):
    """BitMEX reports inverse sizes in quote currency; limits are swapped."""
    limits = handler.market_limits("XBTUSD")
    assert limits.amount.max == 50.0
    assert limits.cost.max == 10000000.0

    quanto = handler.market_limits("ETHUSD")
    assert quanto.amount.max == 10000000.0


@pytest.mark.asyncio
async def test_default_margin_mode_is_isolated(handler):
    assert handler.default_margin_mode.value == "isolated"
