"""ccxt-backed exchange adapter.

Architecture:
    ``CcxtExchangeAdapter`` owns one relay-aware ccxt async client and maps
    the ``ExchangeAdapter`` surface onto ccxt unified methods. Exchange
    subclasses adjust behavior through hooks instead of re-implementing
    whole operations:
    - ``order_params``: ccxt params for ``create_order``
    - ``translate_order_type`` / ``normalize_order``: order type spellings
    - ``translate_error``: exchange-specific error message patterns

Design Decisions:
    - Every ``ccxt.BaseError`` is translated into the ``ExchangeError``
      hierarchy with the original chained as ``__cause__``
    - Market orders never carry a price; some endpoints reject it
    - Mutating calls are never retried here

See Also:
    - adapters.exchanges: Binance, BitMEX and KuCoin specializations
    - translate_ccxt_error: generic ccxt -> ExchangeError mapping
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import ccxt
import ccxt.async_support as ccxt_async

from ..core.capabilities import DEFAULT_CAPABILITIES, ExchangeCapabilities
from ..core.enums import OrderSide, OrderType
from ..core.exceptions import ExchangeError, MarketNotFoundError, SymbolNotFoundError
from ..core.params import ExtraOrderParams
from ..handlers.factory import handler_for
from ..handlers.linear import ContractHandler
from ..markets.encoder import MarketEncoder
from ..models.order import Balance, DepositAddress, ExchangeOrder, Transaction
from ..utils.ccxt import translate_ccxt_error
from .base import ExchangeAdapter

logger = logging.getLogger(__name__)


class CcxtExchangeAdapter(ExchangeAdapter):
    """Adapter over a ccxt async client."""

    def __init__(
        self,
        exchange_id: str,
        client: ccxt_async.Exchange,
        encoder: MarketEncoder | None = None,
        capabilities: ExchangeCapabilities = DEFAULT_CAPABILITIES,
        *,
        broker_id: str | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            exchange_id: Normalized exchange id
            client: Relay-aware ccxt client (see ``adapters.clients``)
            encoder: Market encoder used to resolve internal ids
            capabilities: Static capability flags for the exchange
            broker_id: Prefix for generated client order ids
        """
        self._id = exchange_id
        self.client = client
        self.encoder = encoder
        self.capabilities = capabilities
        self.broker_id = broker_id
        self.handler: ContractHandler | None = (
            handler_for(exchange_id, encoder, capabilities) if encoder is not None else None
        )

    @property
    def id(self) -> str:
        return self._id

    # --- error translation -----------------------------------------------

    def translate_error(self, exc: ccxt.BaseError) -> ExchangeError:
        """Map a ccxt error to ``ExchangeError``; override for message quirks."""
        return translate_ccxt_error(exc, exchange=self.id)

    @contextmanager
    def _translated(self) -> Iterator[None]:
        try:
            yield
        except ccxt.BaseError as exc:
            raise self.translate_error(exc) from exc

    async def _call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        with self._translated():
            return await getattr(self.client, method)(*args, **kwargs)

    # --- markets and symbols ---------------------------------------------

    async def load_markets(self, reload: bool = False) -> dict[str, dict[str, Any]]:
        return await self._call("load_markets", reload)

    async def market_id(self, symbol: str) -> str:
        await self.load_markets()
        with self._translated():
            return self.client.market_id(symbol)

    async def symbol_for_id(self, market_id: str) -> str:
        await self.load_markets()
        return self.client.safe_symbol(market_id)

    def market(self, symbol: str) -> dict[str, Any]:
        with self._translated():
            return self.client.market(symbol)

    def find_symbol_format_agnostic(self, symbol: str) -> dict[str, Any] | None:
        markets_by_id = self.client.markets_by_id or {}
        by_id = markets_by_id.get(symbol)
        if by_id:
            # ccxt maps an id to a list when several markets share it
            return by_id[0] if isinstance(by_id, list) else by_id

        markets = self.client.markets or {}
        if symbol in markets:
            return markets[symbol]

        if self.encoder is not None:
            try:
                native_symbol = self.encoder.market(symbol).native_symbol
            except (MarketNotFoundError, SymbolNotFoundError):
                return None
            return markets.get(native_symbol)
        return None

    def set_auth(self, api_key: str, secret: str, password: str | None = None) -> None:
        self.client.apiKey = api_key
        self.client.secret = secret
        self.client.password = password or ""
        logger.debug("Credentials replaced", extra={"exchange": self.id})

    def amount_to_precision(self, symbol: str, amount: float) -> float:
        with self._translated():
            return float(self.client.amount_to_precision(symbol, amount))

    def price_to_precision(self, symbol: str, price: float) -> float:
        with self._translated():
            return float(self.client.price_to_precision(symbol, price))

    # --- orders ----------------------------------------------------------

    def translate_order_type(self, order_type: OrderType) -> str:
        """Exchange spelling for an order type."""
        return order_type.value

    def order_params(
        self, order_type: OrderType, side: OrderSide, params: ExtraOrderParams
    ) -> dict[str, Any]:
        """ccxt params for ``create_order``."""
        ccxt_params: dict[str, Any] = {}
        if params.client_order_id:
            ccxt_params["clientOrderId"] = params.client_order_id
        return ccxt_params

    def normalize_order(self, order: dict[str, Any]) -> dict[str, Any]:
        """Fix exchange-specific fields of a ccxt order before parsing."""
        return order

    def parse_order(self, order: dict[str, Any]) -> ExchangeOrder:
        return ExchangeOrder.from_ccxt(self.normalize_order(order))

    async def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: float | None = None,
        params: ExtraOrderParams | None = None,
    ) -> ExchangeOrder:
        parsed_type = OrderType.parse(order_type)
        parsed_side = OrderSide(side.lower())
        ccxt_params = self.order_params(parsed_type, parsed_side, params or ExtraOrderParams())
        if parsed_type == OrderType.MARKET:
            price = None

        logger.debug(
            "Creating order",
            extra={"exchange": self.id, "symbol": symbol, "type": parsed_type.value, "side": side},
        )
        order = await self._call(
            "create_order",
            symbol,
            self.translate_order_type(parsed_type),
            parsed_side.value,
            amount,
            price,
            ccxt_params,
        )
        return self.parse_order(order)

    async def cancel_order(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        return self.parse_order(await self._call("cancel_order", order_id, symbol))

    async def order_info(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        return self.parse_order(await self._call("fetch_order", order_id, symbol))

    async def _order_list(
        self, method: str, symbol: str | None, since: int | None, limit: int | None
    ) -> list[ExchangeOrder]:
        orders = await self._call(method, symbol, since, limit)
        return [self.parse_order(order) for order in orders]

    async def orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        return await self._order_list("fetch_orders", symbol, since, limit)

    async def open_orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        return await self._order_list("fetch_open_orders", symbol, since, limit)

    async def closed_orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        return await self._order_list("fetch_closed_orders", symbol, since, limit)

    async def order_book(self, symbol: str, limit: int | None = None) -> dict[str, Any]:
        return await self._call("fetch_order_book", symbol, limit)

    # --- account ---------------------------------------------------------

    async def fetch_balance(self) -> Balance:
        return Balance.from_ccxt(await self._call("fetch_balance"))

    async def deposit_address(self, code: str, network: str | None = None) -> DepositAddress:
        params = {"network": network} if network else {}
        response = await self._call("fetch_deposit_address", code, params)
        return DepositAddress(
            currency=response.get("currency") or code,
            address=response["address"],
            tag=response.get("tag"),
            network=response.get("network") or network,
            info=response.get("info") or {},
        )

    async def deposits(
        self, code: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[Transaction]:
        transactions = await self._call("fetch_deposits", code, since, limit)
        return [Transaction.from_ccxt(tx) for tx in transactions]

    async def withdrawals(
        self, code: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[Transaction]:
        transactions = await self._call("fetch_withdrawals", code, since, limit)
        return [Transaction.from_ccxt(tx) for tx in transactions]

    async def withdraw(
        self,
        code: str,
        amount: float,
        address: str,
        tag: str | None = None,
        network: str | None = None,
    ) -> Transaction:
        params = {"network": network} if network else {}
        response = await self._call("withdraw", code, amount, address, tag, params)
        return Transaction.from_ccxt(response)

    def supports_margin_mode(self) -> bool:
        return self.capabilities.supports_margin_mode

    # --- lifecycle -------------------------------------------------------

    async def close(self) -> None:
        await self.client.close()
