"""Bidirectional market index."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..models.market import Market

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketIndex:
    """Internal id -> Market and native symbol -> internal id.

    Both mappings are read-only views built in one pass, so every market
    reachable from one side is reachable from the other with the same id.
    """

    by_internal_id: Mapping[str, Market] = field(default_factory=lambda: MappingProxyType({}))
    by_native_symbol: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_markets(cls, markets: Iterable[Market]) -> MarketIndex:
        """Build an index; the first market wins on a duplicate internal id."""
        by_internal_id: dict[str, Market] = {}
        by_native_symbol: dict[str, str] = {}
        for market in markets:
            if market.internal_id in by_internal_id:
                logger.warning(
                    f"Duplicate internal id {market.internal_id}, "
                    f"keeping {by_internal_id[market.internal_id].native_symbol}, "
                    f"skipping {market.native_symbol}"
                )
                continue
            by_internal_id[market.internal_id] = market
            by_native_symbol[market.native_symbol] = market.internal_id
        return cls(
            by_internal_id=MappingProxyType(by_internal_id),
            by_native_symbol=MappingProxyType(by_native_symbol),
        )

    def market(self, internal_id: str) -> Market | None:
        return self.by_internal_id.get(internal_id)

    def native_symbol(self, internal_id: str) -> str | None:
        market = self.by_internal_id.get(internal_id)
        return market.native_symbol if market is not None else None

    def internal_id(self, native_symbol: str) -> str | None:
        return self.by_native_symbol.get(native_symbol)

    def __len__(self) -> int:
        return len(self.by_internal_id)

    def __contains__(self, internal_id: object) -> bool:
        return internal_id in self.by_internal_id
