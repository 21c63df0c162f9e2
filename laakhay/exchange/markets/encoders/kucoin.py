"""KuCoin encoder."""

from __future__ import annotations

from ...core import codes
from ..encoder import MarketEncoder


class KucoinMarketEncoder(MarketEncoder):
    """KuCoin renamed Bitcoin Cash ABC back to BCH; old ids still arrive."""

    exchange_name = codes.KUCOIN

    def normalize_internal_id(self, internal_id: str) -> str:
        return internal_id.strip().replace("BCHABC", "BCH")
