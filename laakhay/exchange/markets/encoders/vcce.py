"""VCC Exchange encoder."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...core import codes
from ..encoder import MarketEncoder


class VcceMarketEncoder(MarketEncoder):
    """Native ids look like ``eth_btc``; internal id is ``ETHBTC``."""

    exchange_name = codes.VCCE

    def internal_id_for(self, raw_market: Mapping[str, Any]) -> str:
        return str(raw_market["id"]).replace("_", "").upper()
