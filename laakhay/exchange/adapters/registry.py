"""Adapter registry and factory.

Maps a normalized exchange id to the adapter class and protocol client that
implement it, and wires an adapter together with its encoder, capabilities
and relay dispatcher.

Architecture:
    - AdapterRegistration: adapter class + ccxt client id per exchange
    - AdapterRegistry: explicit id -> registration table
    - create_adapter: name resolution, settings, dispatcher, encoder, and
      the optional paper-trade wrapper

Design Decisions:
    - No reflection: unknown ids raise ``ConfigurationError``
    - The function relay invoker is supplied by the caller, who owns its
      lifecycle; FUNCTION mode without one is a configuration error
    - Market sources build their own short-lived client, so loading markets
      never touches the trading client's credentials

See Also:
    - EncoderRegistry: the same pattern for market encoders
    - resolve_exchange_id: platform name -> registry id
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from ..config import LaakhayExchangeSettings, get_settings
from ..core.capabilities import get_capabilities
from ..core.codes import resolve_exchange_id
from ..core.enums import ExchangeType
from ..core.exceptions import ConfigurationError
from ..dispatch.dispatcher import RelayDispatcher
from ..dispatch.relay import FunctionInvoker
from ..markets.cache import MarketCacheStore
from ..markets.registry import get_encoder_registry
from ..markets.source import CcxtMarketSource
from .base import ExchangeAdapter
from .ccxt import CcxtExchangeAdapter
from .clients import build_client
from .exchanges import BinanceAdapter, BinanceFuturesAdapter, BitmexAdapter, KucoinAdapter
from .paper import OrderManager, PaperTradeAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdapterRegistration:
    """How to build the adapter for one exchange."""

    adapter_class: type[CcxtExchangeAdapter]
    client_id: str


class AdapterRegistry:
    """Normalized exchange id -> adapter registration."""

    def __init__(self) -> None:
        self._registrations: dict[str, AdapterRegistration] = {}

    def register(
        self, exchange_id: str, adapter_class: type[CcxtExchangeAdapter], client_id: str
    ) -> None:
        """Register an adapter.

        Raises:
            ConfigurationError: If the id is already registered
        """
        exchange_id = exchange_id.lower()
        if exchange_id in self._registrations:
            raise ConfigurationError(f"Adapter for '{exchange_id}' is already registered")
        self._registrations[exchange_id] = AdapterRegistration(adapter_class, client_id)

    def unregister(self, exchange_id: str) -> None:
        self._registrations.pop(exchange_id.lower(), None)

    def is_registered(self, exchange_id: str) -> bool:
        return exchange_id.lower() in self._registrations

    def list_exchanges(self) -> list[str]:
        return sorted(self._registrations)

    def registration(self, exchange_id: str) -> AdapterRegistration:
        """Registration for a normalized id.

        Raises:
            ConfigurationError: If the id is unknown
        """
        try:
            return self._registrations[exchange_id.lower()]
        except KeyError as exc:
            raise ConfigurationError(f"No exchange adapter registered for '{exchange_id}'") from exc


_default_registry: AdapterRegistry | None = None


def get_adapter_registry() -> AdapterRegistry:
    """Global registry with the built-in adapters registered."""
    global _default_registry
    if _default_registry is None:
        registry = AdapterRegistry()
        registry.register("binance", BinanceAdapter, "binance")
        registry.register("binancefutures", BinanceFuturesAdapter, "binanceusdm")
        registry.register("bitmex", BitmexAdapter, "bitmex")
        registry.register("kucoin", KucoinAdapter, "kucoin")
        registry.register("ascendex", CcxtExchangeAdapter, "ascendex")
        _default_registry = registry
    return _default_registry


def create_adapter(
    exchange_name: str,
    exchange_type: ExchangeType | str = ExchangeType.SPOT,
    *,
    api_key: str | None = None,
    secret: str | None = None,
    password: str | None = None,
    settings: LaakhayExchangeSettings | None = None,
    cache: MarketCacheStore | None = None,
    invoker: FunctionInvoker | None = None,
    order_manager: OrderManager | None = None,
    registry: AdapterRegistry | None = None,
    rng: random.Random | None = None,
) -> ExchangeAdapter:
    """Build a ready-to-use adapter for a platform exchange name.

    Args:
        exchange_name: Platform name (``Binance``, ``Zignaly``, ``BitMEX``...)
        exchange_type: Spot or futures account
        api_key: API key for private calls
        secret: API secret
        password: API passphrase (KuCoin)
        settings: Library settings (default: loaded from the environment)
        cache: Market cache shared across encoders
        invoker: Relay function invoker, required in FUNCTION dispatch mode
        order_manager: When given, the adapter is wrapped for paper trading
        registry: Adapter registry (default: the global one)
        rng: Random source for relay selection

    Raises:
        ConfigurationError: If the exchange is unknown or dispatch is misconfigured
    """
    exchange_id = resolve_exchange_id(exchange_name, exchange_type)
    registration = (registry or get_adapter_registry()).registration(exchange_id)
    settings = settings or get_settings()
    capabilities = get_capabilities(exchange_id)

    dispatcher = RelayDispatcher.from_settings(
        settings.dispatch, capabilities, invoker=invoker, rng=rng
    )
    partner_id = settings.kucoin_partner_id if capabilities.has_partner_signature else None
    partner_key = settings.kucoin_partner_key if capabilities.has_partner_signature else None

    client = build_client(
        registration.client_id,
        api_key=api_key,
        secret=secret,
        password=password,
        dispatcher=dispatcher,
        partner_id=partner_id,
        partner_key=partner_key,
        enable_rate_limit=settings.enable_rate_limit,
    )

    def market_client():
        return build_client(
            registration.client_id,
            dispatcher=dispatcher,
            enable_rate_limit=settings.enable_rate_limit,
        )

    source = CcxtMarketSource(market_client, exchange=exchange_id)
    encoder = get_encoder_registry().encoder_class(exchange_id)(
        source, cache, ttl_seconds=settings.market_cache_ttl_seconds
    )
    adapter: ExchangeAdapter = registration.adapter_class(
        exchange_id,
        client,
        encoder,
        capabilities,
        broker_id=settings.broker_ids.get(exchange_id),
    )
    logger.debug(
        "Created exchange adapter",
        extra={"exchange": exchange_id, "dispatch_mode": dispatcher.mode.value},
    )

    if order_manager is not None:
        return PaperTradeAdapter(adapter, order_manager, leverage=settings.paper_leverage)
    return adapter
