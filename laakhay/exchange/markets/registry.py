"""Encoder registry.

Maps a normalized exchange id (``binance``, ``binancefutures``, ``bitmex``...)
to the encoder class that understands its markets. Lookups never fall back to
name-based class resolution: unknown ids are configuration errors.

Architecture:
    - Explicit registration at import via ``get_encoder_registry()``
    - Encoders share whatever ``MarketCacheStore`` the caller passes in, so
      two encoders for the same exchange reuse the same snapshot

See Also:
    - AdapterRegistry: the same pattern for exchange adapters
"""

from __future__ import annotations

from ..core.codes import resolve_exchange_id
from ..core.enums import ExchangeType
from ..core.exceptions import ConfigurationError
from .cache import MarketCacheStore
from .encoder import MarketEncoder
from .encoders import (
    AscendexMarketEncoder,
    BinanceFuturesMarketEncoder,
    BinanceMarketEncoder,
    BitmexMarketEncoder,
    KucoinMarketEncoder,
    VcceMarketEncoder,
)
from .source import MarketSource


class EncoderRegistry:
    """Normalized exchange id -> encoder class."""

    def __init__(self) -> None:
        self._encoders: dict[str, type[MarketEncoder]] = {}

    def register(self, exchange_id: str, encoder_class: type[MarketEncoder]) -> None:
        """Register an encoder class.

        Raises:
            ConfigurationError: If the id is already registered
        """
        exchange_id = exchange_id.lower()
        if exchange_id in self._encoders:
            raise ConfigurationError(f"Encoder for '{exchange_id}' is already registered")
        self._encoders[exchange_id] = encoder_class

    def unregister(self, exchange_id: str) -> None:
        self._encoders.pop(exchange_id.lower(), None)

    def is_registered(self, exchange_id: str) -> bool:
        return exchange_id.lower() in self._encoders

    def list_exchanges(self) -> list[str]:
        return sorted(self._encoders)

    def encoder_class(self, exchange_id: str) -> type[MarketEncoder]:
        """Encoder class for a normalized id.

        Raises:
            ConfigurationError: If the id is unknown
        """
        try:
            return self._encoders[exchange_id.lower()]
        except KeyError as exc:
            raise ConfigurationError(f"No market encoder registered for '{exchange_id}'") from exc

    def create(
        self,
        exchange_name: str,
        source: MarketSource,
        *,
        exchange_type: ExchangeType | str = ExchangeType.SPOT,
        cache: MarketCacheStore | None = None,
        ttl_seconds: float | None = None,
    ) -> MarketEncoder:
        """Build the encoder for a platform exchange name and account type."""
        exchange_id = resolve_exchange_id(exchange_name, exchange_type)
        encoder_class = self.encoder_class(exchange_id)
        return encoder_class(source, cache, ttl_seconds=ttl_seconds)


_default_registry: EncoderRegistry | None = None


def get_encoder_registry() -> EncoderRegistry:
    """Global registry with the built-in encoders registered."""
    global _default_registry
    if _default_registry is None:
        registry = EncoderRegistry()
        registry.register("binance", BinanceMarketEncoder)
        registry.register("binancefutures", BinanceFuturesMarketEncoder)
        registry.register("bitmex", BitmexMarketEncoder)
        registry.register("kucoin", KucoinMarketEncoder)
        registry.register("vcce", VcceMarketEncoder)
        registry.register("ascendex", AscendexMarketEncoder)
        _default_registry = registry
    return _default_registry
