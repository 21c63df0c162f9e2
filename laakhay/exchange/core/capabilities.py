"""Static per-exchange capability flags.

Dispatch and math code never branches on an exchange name; it asks this table
instead. New exchanges are added here, not in the dispatch logic.

Architecture:
    Frozen dataclass per exchange, looked up by the normalized registry id
    produced by ``resolve_exchange_id``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ExchangeCapabilities:
    """Behavioral switches for one exchange."""

    has_inverse_contracts: bool = False
    needs_clock_skew_retry: bool = False
    has_partner_signature: bool = False
    splits_market_orders: bool = False
    supports_margin_mode: bool = False


DEFAULT_CAPABILITIES = ExchangeCapabilities()

EXCHANGE_CAPABILITIES: dict[str, ExchangeCapabilities] = {
    "binance": ExchangeCapabilities(
        needs_clock_skew_retry=True,
        splits_market_orders=True,
    ),
    "binancefutures": ExchangeCapabilities(
        needs_clock_skew_retry=True,
        splits_market_orders=True,
        supports_margin_mode=True,
    ),
    "bitmex": ExchangeCapabilities(
        has_inverse_contracts=True,
        supports_margin_mode=True,
    ),
    "kucoin": ExchangeCapabilities(has_partner_signature=True),
    "vcce": DEFAULT_CAPABILITIES,
    "ascendex": DEFAULT_CAPABILITIES,
}


def get_capabilities(exchange_id: str) -> ExchangeCapabilities:
    """Look up capabilities for a normalized exchange id.

    Raises:
        ConfigurationError: If the exchange is unknown
    """
    try:
        return EXCHANGE_CAPABILITIES[exchange_id.lower()]
    except KeyError as exc:
        raise ConfigurationError(f"No capabilities registered for '{exchange_id}'") from exc
