"""Exchange identifiers and name resolution.

Platform exchange names (``Binance``, ``BitMEX``...) differ from the adapter
identifiers used by the registries (``binance``, ``binancefutures``...) and
from protocol-client ids (``binance``, ``binanceusdm``...). This module is the
single place where those are reconciled.
"""

from __future__ import annotations

from .enums import ExchangeType
from .exceptions import ConfigurationError

BINANCE = "Binance"
BITMEX = "BitMEX"
KUCOIN = "KuCoin"
BINANCE_FUTURES = "BinanceFutures"
ZIGNALY = "Zignaly"
ZIGNALY_FUTURES = "ZignalyFutures"
VCCE = "VCCE"
ASCENDEX = "AscendEX"

# Platform name -> protocol client id
CLIENT_IDS: dict[str, str] = {
    BINANCE: "binance",
    BITMEX: "bitmex",
    KUCOIN: "kucoin",
    BINANCE_FUTURES: "binanceusdm",
    ZIGNALY: "binance",
    ZIGNALY_FUTURES: "binanceusdm",
    VCCE: "vcc",
    ASCENDEX: "ascendex",
}

# Brokerage aliases collapse onto the exchange whose prices they share
PRICE_ALIASES: dict[str, str] = {
    BINANCE: BINANCE,
    BITMEX: BITMEX,
    KUCOIN: KUCOIN,
    BINANCE_FUTURES: BINANCE_FUTURES,
    ZIGNALY: BINANCE,
    ZIGNALY_FUTURES: BINANCE_FUTURES,
    VCCE: VCCE,
    ASCENDEX: ASCENDEX,
}

# Platform name -> (exchange, account type)
NAME_AND_TYPE: dict[str, tuple[str, ExchangeType]] = {
    BINANCE: (BINANCE, ExchangeType.SPOT),
    BITMEX: (BITMEX, ExchangeType.FUTURES),
    KUCOIN: (KUCOIN, ExchangeType.SPOT),
    BINANCE_FUTURES: (BINANCE, ExchangeType.FUTURES),
    VCCE: (VCCE, ExchangeType.SPOT),
    ASCENDEX: (ASCENDEX, ExchangeType.SPOT),
}


def resolve_exchange_id(
    exchange_name: str | None,
    exchange_type: ExchangeType | str = ExchangeType.SPOT,
) -> str:
    """Normalize a platform exchange name into a registry identifier.

    Examples:
        >>> resolve_exchange_id("Zignaly")
        'binance'
        >>> resolve_exchange_id("binance", "futures")
        'binancefutures'

    Raises:
        ConfigurationError: If no exchange name is given
    """
    if not exchange_name or not exchange_name.strip():
        raise ConfigurationError("Exchange name is required")

    exchange_id = exchange_name.strip().lower()
    if exchange_id == ZIGNALY.lower():
        exchange_id = "binance"
    if exchange_id == ZIGNALY_FUTURES.lower():
        exchange_id = "binancefutures"

    try:
        account_type = ExchangeType(str(getattr(exchange_type, "value", exchange_type)).lower())
    except ValueError as exc:
        raise ConfigurationError(f"Unknown exchange type '{exchange_type}'") from exc
    if exchange_id == "binance" and account_type == ExchangeType.FUTURES:
        exchange_id = "binancefutures"
    return exchange_id


def canonical_name(exchange_name: str) -> str:
    """Return the platform spelling for a case-insensitive name.

    Raises:
        ConfigurationError: If the name is not a known exchange
    """
    for name in PRICE_ALIASES:
        if name.upper() == exchange_name.upper():
            return name
    raise ConfigurationError(f"Unknown exchange '{exchange_name}'")


def price_exchange(exchange_name: str) -> str:
    """Exchange whose market data backs ``exchange_name``."""
    return PRICE_ALIASES[canonical_name(exchange_name)]


def client_id(exchange_name: str) -> str:
    """Protocol client id for a platform exchange name."""
    return CLIENT_IDS[canonical_name(exchange_name)]
