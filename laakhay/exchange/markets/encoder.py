"""Market encoder: internal symbol <-> exchange native symbol.

Each exchange gets an encoder that turns raw protocol-client markets into
``Market`` records keyed by the platform-wide internal id, and answers
translation and metadata questions against a cached ``MarketIndex``.

Architecture:
    - MarketSource: supplies raw market records on a cache miss
    - MarketCacheStore: holds the market tuple and the derived index
    - MarketEncoder: base behavior; exchange subclasses override the hooks
      ``is_importable``, ``internal_id_for``, ``build_market``,
      ``normalize_internal_id`` and the quote/asset accessors

Design Decisions:
    - Index is built lazily on first lookup and replaced wholesale
    - Rebuilds are serialized per encoder with an ``asyncio.Lock``; readers
      never take the lock and see either the old or the new snapshot;
      a new snapshot replaces the old one only after its fetch succeeds
    - Unmapped symbols raise ``SymbolNotFoundError``, missing metadata raises
      ``MarketNotFoundError``; nothing is defaulted

Symbol Resolution Flow:
    1. Caller passes an internal id (``BTCUSDT``)
    2. Alias normalization rewrites legacy tickers
    3. Index lookup returns the native symbol (``BTC/USDT``)

See Also:
    - MarketIndex: the bidirectional snapshot
    - ContractHandler: consumes ``market()`` for arithmetic
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..core.exceptions import MarketNotFoundError, SymbolNotFoundError
from ..models.market import Market, MarketLimits, MinMax, Precision
from .cache import InMemoryMarketCache, MarketCacheStore, index_key, markets_key
from .index import MarketIndex
from .source import MarketSource

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


def strip_symbol(symbol: str) -> str:
    """Uppercase a symbol and drop separators.

    Examples:
        >>> strip_symbol(" btc/usdt ")
        'BTCUSDT'
    """
    return _NON_ALPHANUMERIC.sub("", symbol.strip()).upper()


def _min_max(raw: Mapping[str, Any] | None) -> MinMax:
    if not raw:
        return MinMax()
    return MinMax(min=raw.get("min"), max=raw.get("max"))


def parse_limits(raw: Mapping[str, Any] | None) -> MarketLimits:
    """Build ``MarketLimits`` from a ccxt ``limits`` structure."""
    raw = raw or {}
    return MarketLimits(
        amount=_min_max(raw.get("amount")),
        price=_min_max(raw.get("price")),
        cost=_min_max(raw.get("cost")),
        market=_min_max(raw.get("market")),
    )


def parse_precision(raw: Mapping[str, Any] | None) -> Precision:
    raw = raw or {}
    return Precision(amount=raw.get("amount"), price=raw.get("price"))


class MarketEncoder:
    """Base encoder shared by all exchanges."""

    exchange_name: str = ""
    # Legacy internal ids rewritten before lookup
    aliases: Mapping[str, str] = {}

    def __init__(
        self,
        source: MarketSource,
        cache: MarketCacheStore | None = None,
        *,
        ttl_seconds: float | None = None,
    ) -> None:
        self._source = source
        self._cache = cache if cache is not None else InMemoryMarketCache()
        self._ttl_seconds = ttl_seconds
        self._lock = asyncio.Lock()
        self._last_index: MarketIndex | None = None

    # --- hooks -----------------------------------------------------------

    def is_importable(self, raw_market: Mapping[str, Any]) -> bool:
        """Whether a raw market belongs in the index."""
        return True

    def internal_id_for(self, raw_market: Mapping[str, Any]) -> str:
        """Derive the internal id straight from a raw market."""
        return strip_symbol(f"{raw_market['base']}{raw_market['quote']}")

    def normalize_internal_id(self, internal_id: str) -> str:
        """Rewrite legacy ids; pure and deterministic."""
        internal_id = internal_id.strip()
        return self.aliases.get(internal_id, internal_id)

    def build_market(self, raw_market: Mapping[str, Any]) -> Market:
        """Map one raw market into a ``Market``."""
        base_id = raw_market.get("baseId")
        quote_id = raw_market.get("quoteId")
        return Market(
            internal_id=self.internal_id_for(raw_market),
            native_symbol=raw_market["symbol"],
            market_id=str(raw_market["id"]),
            base=raw_market["base"],
            quote=raw_market["quote"],
            base_id=base_id,
            quote_id=quote_id,
            precision=parse_precision(raw_market.get("precision")),
            limits=parse_limits(raw_market.get("limits")),
            multiplier=1.0,
            active=bool(raw_market.get("active")),
            short=raw_market["symbol"],
            trade_view_symbol=f"{base_id or ''}{quote_id or ''}" or None,
            units_investment=raw_market["quote"],
            units_amount=raw_market["base"],
            info=dict(raw_market.get("info") or {}),
        )

    def translate_asset(self, asset: str) -> str:
        """Exchange spelling of an asset code."""
        return asset

    # --- loading ---------------------------------------------------------

    async def load_markets(self, force: bool = False) -> list[Market]:
        """Return cached markets, fetching them on a miss or when forced.

        A fetch rebuilds the index too.

        Raises:
            ExchangeError: If the market source fails
        """
        if not force:
            cached = self._cache.get(markets_key(self.exchange_name))
            if cached is not None:
                return list(cached)
        async with self._lock:
            if not force:
                cached = self._cache.get(markets_key(self.exchange_name))
                if cached is not None:
                    return list(cached)
            markets, _ = await self._rebuild_locked()
            return list(markets)

    async def load_index(self, force: bool = False) -> MarketIndex:
        """Return the cached index, rebuilding it from markets when needed.

        A forced call reloads markets from the source as well. A failed
        reload leaves the previous snapshot in place.
        """
        if not force:
            cached = self._cache.get(index_key(self.exchange_name))
            if cached is not None:
                self._last_index = cached
                return cached
        async with self._lock:
            if not force:
                # Another caller may have rebuilt while we waited
                cached = self._cache.get(index_key(self.exchange_name))
                if cached is not None:
                    self._last_index = cached
                    return cached
                markets = self._cache.get(markets_key(self.exchange_name))
                if markets is not None:
                    index = MarketIndex.from_markets(markets)
                    self._publish_index(index)
                    return index
            _, index = await self._rebuild_locked()
            return index

    async def _rebuild_locked(self) -> tuple[tuple[Market, ...], MarketIndex]:
        raw_markets = await self._source.fetch_markets()

        markets: list[Market] = []
        for raw_market in raw_markets:
            if not self.is_importable(raw_market):
                continue
            try:
                markets.append(self.build_market(raw_market))
            except (KeyError, ValidationError) as exc:
                logger.warning(
                    f"Skipping malformed market {raw_market.get('id')} on {self.exchange_name}: {exc}"
                )

        snapshot = tuple(markets)
        index = MarketIndex.from_markets(snapshot)
        self._cache.set(markets_key(self.exchange_name), snapshot, self._ttl_seconds)
        self._publish_index(index)
        logger.info(f"Loaded {len(snapshot)} markets for {self.exchange_name}")
        return snapshot, index

    def _publish_index(self, index: MarketIndex) -> None:
        # No await between delete and set: readers see the old or the new index
        self._cache.delete(index_key(self.exchange_name))
        self._cache.set(index_key(self.exchange_name), index, self._ttl_seconds)
        self._last_index = index
        logger.debug(
            "Market index rebuilt",
            extra={"exchange": self.exchange_name, "markets": len(index)},
        )

    def current_index(self) -> MarketIndex:
        """Index currently in the cache, without loading.

        After the cached entry expires the last index this encoder saw is
        served until the next load replaces it.

        Raises:
            MarketNotFoundError: If markets have not been loaded
        """
        index = self._cache.get(index_key(self.exchange_name))
        if index is not None:
            self._last_index = index
            return index
        if self._last_index is None:
            raise MarketNotFoundError(
                f"Markets for {self.exchange_name} are not loaded",
                exchange=self.exchange_name,
            )
        return self._last_index

    # --- translation -----------------------------------------------------

    async def to_native(self, internal_id: str) -> str:
        """Native symbol for an internal id.

        Raises:
            SymbolNotFoundError: If the id has no mapping
        """
        normalized = self.normalize_internal_id(internal_id)
        index = await self.load_index()
        native_symbol = index.native_symbol(normalized)
        if native_symbol is None:
            raise SymbolNotFoundError(
                f"Symbol {internal_id} not found in {self.exchange_name}",
                exchange=self.exchange_name,
                value=internal_id,
            )
        return native_symbol

    async def from_native(
        self,
        native_symbol: str,
        raw_market: Mapping[str, Any] | None = None,
    ) -> str:
        """Internal id for a native symbol.

        With ``raw_market`` the id is derived directly, without the index.

        Raises:
            SymbolNotFoundError: If the symbol has no mapping
        """
        if raw_market is not None:
            return self.internal_id_for(raw_market)
        index = await self.load_index()
        internal_id = index.internal_id(native_symbol.strip())
        if internal_id is None:
            raise SymbolNotFoundError(
                f"Native symbol {native_symbol} not found in {self.exchange_name}",
                exchange=self.exchange_name,
                value=native_symbol,
            )
        return internal_id

    def market(self, internal_id: str) -> Market:
        """Market for an internal id from the current snapshot.

        Raises:
            MarketNotFoundError: If absent from the current cache
        """
        normalized = self.normalize_internal_id(internal_id)
        market = self.current_index().market(normalized)
        if market is None:
            raise MarketNotFoundError(
                f"Market {internal_id} not found in {self.exchange_name}",
                exchange=self.exchange_name,
                value=internal_id,
            )
        return market

    async def get_market(self, internal_id: str) -> Market:
        """Market for an internal id, rebuilding the index once on a miss."""
        await self.load_index()
        try:
            return self.market(internal_id)
        except MarketNotFoundError:
            logger.info(f"Market {internal_id} missing on {self.exchange_name}, forcing reload")
            await self.load_index(force=True)
            return self.market(internal_id)

    # --- accessors -------------------------------------------------------

    def multiplier(self, internal_id: str) -> float:
        return self.market(internal_id).multiplier

    def is_inverse(self, internal_id: str) -> bool:
        return self.market(internal_id).is_inverse

    def is_quanto(self, internal_id: str) -> bool:
        return self.market(internal_id).is_quanto

    def max_leverage(self, internal_id: str) -> float | None:
        return self.market(internal_id).max_leverage

    def short(self, internal_id: str) -> str | None:
        return self.market(internal_id).short

    def trade_view_symbol(self, internal_id: str) -> str | None:
        return self.market(internal_id).trade_view_symbol

    def reference_symbol(self, internal_id: str) -> str | None:
        return self.market(internal_id).reference_symbol

    def display_symbol(self, internal_id: str) -> str:
        """``BASE/QUOTE`` label for an internal id."""
        return self.market(internal_id).display_symbol

    def position_size_quote(self, internal_id: str) -> str:
        """Asset position sizes are denominated in."""
        return self.market(internal_id).quote

    def exchange_settings_quote(self, internal_id: str) -> str:
        """Quote asset used by per-exchange position size settings."""
        return self.position_size_quote(internal_id)

    def valid_quote_assets(self) -> list[str]:
        """Distinct quote assets across loaded markets, in index order."""
        quotes: list[str] = []
        for market in self.current_index().by_internal_id.values():
            if market.quote not in quotes:
                quotes.append(market.quote)
        return quotes

    def exchange_settings_quote_assets(self) -> list[str]:
        return self.valid_quote_assets()

    def base_quote(self, pair: str) -> tuple[str, str]:
        """Base and quote for an internal id or a separator-laden pair.

        Raises:
            MarketNotFoundError: If neither spelling is known
        """
        try:
            market = self.market(pair)
        except MarketNotFoundError:
            market = self.market(strip_symbol(pair))
        return market.base, market.quote
