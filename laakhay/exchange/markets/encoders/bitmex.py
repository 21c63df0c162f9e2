"""BitMEX encoder.

BitMEX lists linear, inverse and quanto contracts side by side, prices
everything in XBT and calls bitcoin ``XBT``. Contract flags and the
multiplier come from the raw ``info`` blob:

    multiplier   = abs(info.multiplier / 1e8)   (satoshi -> XBT)
    max_leverage = 1 / info.initMargin
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...core import codes
from ...models.market import Market
from ..encoder import MarketEncoder

SATOSHI = 100_000_000
SETTLEMENT_ASSET = "XBT"
QUANTO_UNITS = "Cont"


class BitmexMarketEncoder(MarketEncoder):
    exchange_name = codes.BITMEX

    def internal_id_for(self, raw_market: Mapping[str, Any]) -> str:
        return str(raw_market["id"]).strip().upper()

    def build_market(self, raw_market: Mapping[str, Any]) -> Market:
        market = super().build_market(raw_market)
        info = raw_market.get("info") or {}

        raw_multiplier = info.get("multiplier")
        multiplier = abs(float(raw_multiplier) / SATOSHI) if raw_multiplier is not None else 0.0
        init_margin = info.get("initMargin")
        max_leverage = 1 / float(init_margin) if init_margin else None
        is_inverse = bool(info.get("isInverse"))
        is_quanto = bool(info.get("isQuanto"))

        if is_inverse:
            units_amount = raw_market["quote"]
        elif is_quanto:
            units_amount = QUANTO_UNITS
        else:
            units_amount = raw_market["base"]

        internal_id = market.internal_id
        return Market(
            **{
                **market.model_dump(),
                "base": raw_market.get("baseId") or market.base,
                "quote": raw_market.get("quoteId") or market.quote,
                "short": internal_id,
                "trade_view_symbol": internal_id,
                "multiplier": multiplier,
                "max_leverage": max_leverage,
                "is_inverse": is_inverse,
                "is_quanto": is_quanto,
                "reference_symbol": info.get("referenceSymbol"),
                "units_investment": SETTLEMENT_ASSET,
                "units_amount": units_amount,
            }
        )

    def translate_asset(self, asset: str) -> str:
        return SETTLEMENT_ASSET if asset.upper() == "BTC" else asset

    def display_symbol(self, internal_id: str) -> str:
        return self.market(internal_id).market_id

    def position_size_quote(self, internal_id: str) -> str:
        return SETTLEMENT_ASSET

    def exchange_settings_quote(self, internal_id: str) -> str:
        return "BTC"

    def valid_quote_assets(self) -> list[str]:
        return [SETTLEMENT_ASSET]

    def exchange_settings_quote_assets(self) -> list[str]:
        return ["BTC"]
