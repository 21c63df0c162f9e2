"""Binance spot and USD-M futures encoders."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...core import codes
from ...models.market import Market
from ..encoder import MarketEncoder

BINANCE_FUTURES_MAX_LEVERAGE = 125.0


class BinanceMarketEncoder(MarketEncoder):
    """Binance spot: internal id is ``BASEQUOTE``."""

    exchange_name = codes.BINANCE
    aliases = {"YOYOBTC": "YOYOWBTC"}

    def internal_id_for(self, raw_market: Mapping[str, Any]) -> str:
        internal_id = super().internal_id_for(raw_market)
        return self.aliases.get(internal_id, internal_id)

    def valid_quote_assets(self) -> list[str]:
        quotes = super().valid_quote_assets()
        if "BNB" not in quotes:
            quotes.append("BNB")
        return quotes


class BinanceFuturesMarketEncoder(BinanceMarketEncoder):
    """Binance USD-M futures: perpetual contracts only."""

    exchange_name = codes.BINANCE_FUTURES

    def is_importable(self, raw_market: Mapping[str, Any]) -> bool:
        if raw_market.get("type") not in ("future", "swap"):
            return False
        contract_type = (raw_market.get("info") or {}).get("contractType")
        return contract_type is None or contract_type == "PERPETUAL"

    def build_market(self, raw_market: Mapping[str, Any]) -> Market:
        market = super().build_market(raw_market)
        return market.model_copy(update={"max_leverage": BINANCE_FUTURES_MAX_LEVERAGE})

    def valid_quote_assets(self) -> list[str]:
        return MarketEncoder.valid_quote_assets(self)
