"""Shared fixtures for unit tests: raw ccxt markets and a fake market source."""

from __future__ import annotations

from typing import Any

import pytest


def raw_market(
    symbol: str,
    *,
    market_id: str | None = None,
    market_type: str = "spot",
    amount_max: float | None = None,
    amount_min: float | None = 0.001,
    cost_min: float | None = 10.0,
    cost_max: float | None = None,
    info: dict[str, Any] | None = None,
    active: bool = True,
) -> dict[str, Any]:
    """Build a ccxt unified market record for ``BASE/QUOTE``."""
    base, quote = symbol.split(":")[0].split("/")
    return {
        "id": market_id or f"{base}{quote}",
        "symbol": symbol,
        "base": base,
        "quote": quote,
        "baseId": base,
        "quoteId": quote,
        "type": market_type,
        "active": active,
        "precision": {"amount": 0.001, "price": 0.01},
        "limits": {
            "amount": {"min": amount_min, "max": amount_max},
            "price": {"min": 0.01, "max": 1000000.0},
            "cost": {"min": cost_min, "max": cost_max},
            "market": {"min": amount_min, "max": amount_max},
        },
        "info": info or {},
    }


def bitmex_market(
    symbol: str,
    market_id: str,
    *,
    base_id: str,
    quote_id: str,
    multiplier: float,
    init_margin: float | None = 0.01,
    is_inverse: bool = False,
    is_quanto: bool = False,
) -> dict[str, Any]:
    """Build a BitMEX-style raw market with contract details in ``info``."""
    market = raw_market(symbol, market_id=market_id, market_type="swap")
    market["baseId"] = base_id
    market["quoteId"] = quote_id
    market["limits"]["amount"] = {"min": 1.0, "max": 10000000.0}
    market["limits"]["cost"] = {"min": None, "max": 50.0}
    market["info"] = {
        "multiplier": multiplier,
        "initMargin": init_margin,
        "isInverse": is_inverse,
        "isQuanto": is_quanto,
        "referenceSymbol": f".B{market_id}",
    }
    return market


class FakeMarketSource:
    """Market source returning canned raw markets and counting fetches."""

    def __init__(self, markets: list[dict[str, Any]]) -> None:
        self.markets = markets
        self.fetch_count = 0

    async def fetch_markets(self) -> list[dict[str, Any]]:
        self.fetch_count += 1
        return list(self.markets)


@pytest.fixture
def binance_raw_markets() -> list[dict[str, Any]]:
    """Binance spot markets, including a legacy alias target."""
    return [
        raw_market("BTC/USDT", amount_max=100.0),
        raw_market("ETH/USDT", amount_max=9000.0),
        raw_market("ETH/BTC"),
        raw_market("YOYOW/BTC"),
    ]


@pytest.fixture
def binance_source(binance_raw_markets) -> FakeMarketSource:
    return FakeMarketSource(binance_raw_markets)


@pytest.fixture
def bitmex_raw_markets() -> list[dict[str, Any]]:
    """Inverse, quanto and linear BitMEX contracts."""
    return [
        bitmex_market(
            "BTC/USD:BTC",
            "XBTUSD",
            base_id="XBT",
            quote_id="USD",
            multiplier=-100000000,
            is_inverse=True,
        ),
        bitmex_market(
            "ETH/USD:BTC",
            "ETHUSD",
            base_id="ETH",
            quote_id="USD",
            multiplier=100,
            init_margin=0.02,
            is_quanto=True,
        ),
        bitmex_market(
            "XRP/BTC:BTC",
            "XRPZ21",
            base_id="XRP",
            quote_id="XBT",
            multiplier=100000000,
            init_margin=None,
        ),
    ]


@pytest.fixture
def bitmex_source(bitmex_raw_markets) -> FakeMarketSource:
    return FakeMarketSource(bitmex_raw_markets)


@pytest.fixture
def make_raw_market():
    """Factory for ad-hoc raw markets."""
    return raw_market


@pytest.fixture
def make_source():
    """Factory for fake market sources."""
    return FakeMarketSource
