"""Protocol clients with relay hooks.

Each supported exchange gets one ccxt async subclass combining the relay
transport mixin (and the partner signing mixin where the exchange needs it)
with the stock ccxt class. Clients are looked up by ccxt id from an explicit
table; nothing is resolved by reflection.
"""

from __future__ import annotations

from typing import Any

import ccxt.async_support as ccxt_async

from ..core.exceptions import ConfigurationError
from ..dispatch.dispatcher import RelayDispatcher
from ..dispatch.transport import PartnerSignatureMixin, RelayTransportMixin


class BinanceClient(RelayTransportMixin, ccxt_async.binance):
    pass


class BinanceUsdmClient(RelayTransportMixin, ccxt_async.binanceusdm):
    pass


class BitmexClient(RelayTransportMixin, ccxt_async.bitmex):
    pass


class KucoinClient(PartnerSignatureMixin, RelayTransportMixin, ccxt_async.kucoin):
    pass


class AscendexClient(RelayTransportMixin, ccxt_async.ascendex):
    pass


CLIENT_CLASSES: dict[str, type[ccxt_async.Exchange]] = {
    "binance": BinanceClient,
    "binanceusdm": BinanceUsdmClient,
    "bitmex": BitmexClient,
    "kucoin": KucoinClient,
    "ascendex": AscendexClient,
}


def build_client(
    client_id: str,
    *,
    api_key: str | None = None,
    secret: str | None = None,
    password: str | None = None,
    dispatcher: RelayDispatcher | None = None,
    partner_id: str | None = None,
    partner_key: str | None = None,
    enable_rate_limit: bool = True,
    options: dict[str, Any] | None = None,
) -> ccxt_async.Exchange:
    """Instantiate the relay-aware client for a ccxt id.

    Raises:
        ConfigurationError: If no client is registered for ``client_id``
    """
    try:
        client_class = CLIENT_CLASSES[client_id]
    except KeyError as exc:
        raise ConfigurationError(f"No protocol client registered for '{client_id}'") from exc

    config: dict[str, Any] = {"enableRateLimit": enable_rate_limit}
    if api_key:
        config["apiKey"] = api_key
    if secret:
        config["secret"] = secret
    if password:
        config["password"] = password
    if options:
        config["options"] = dict(options)

    client = client_class(config)
    client.relay_dispatcher = dispatcher
    if isinstance(client, PartnerSignatureMixin):
        client.partner_id = partner_id
        client.partner_key = partner_key
    return client
