"""AscendEX encoder."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...core import codes
from ...models.market import Market
from ..encoder import MarketEncoder


class AscendexMarketEncoder(MarketEncoder):
    """Native ids use ``/`` for spot and ``-`` for futures; both are dropped."""

    exchange_name = codes.ASCENDEX

    def internal_id_for(self, raw_market: Mapping[str, Any]) -> str:
        return str(raw_market["id"]).replace("/", "").replace("-", "").upper()

    def build_market(self, raw_market: Mapping[str, Any]) -> Market:
        market = super().build_market(raw_market)
        base = raw_market.get("baseId") or market.base
        quote = raw_market.get("quoteId") or market.quote
        return market.model_copy(update={"base": base, "quote": quote})

    def display_symbol(self, internal_id: str) -> str:
        return self.market(internal_id).market_id
