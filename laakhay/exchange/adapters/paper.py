"""Paper trading over a real adapter.

Architecture:
    ``PaperTradeAdapter`` holds a real ``ExchangeAdapter`` and an
    ``OrderManager``. Market data, symbol resolution and precision come from
    the real exchange; the order lifecycle and balances are simulated by the
    order manager. Account operations that only make sense with real funds
    raise ``NotSupportedError``.

Design Decisions:
    - Composition over one interface: nothing here subclasses a concrete
      exchange adapter
    - Leverage answers are fixed simulation defaults, never forwarded
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from ..core.enums import OrderStatus
from ..core.exceptions import NotSupportedError
from ..core.params import ExtraOrderParams
from ..models.order import (
    Balance,
    DepositAddress,
    ExchangeOrder,
    FuturesTransfer,
    Income,
    Position,
    Transaction,
)
from .base import ExchangeAdapter

logger = logging.getLogger(__name__)

DEFAULT_PAPER_LEVERAGE = 20


class OrderManager(Protocol):
    """Simulated order book and balances, keyed by exchange id."""

    async def create_order(
        self,
        exchange_id: str,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: float | None,
        params: ExtraOrderParams | None,
    ) -> ExchangeOrder:
        ...

    async def order_status(self, exchange_id: str, order_id: str, symbol: str | None) -> ExchangeOrder:
        ...

    async def orders(self, exchange_id: str, symbol: str | None) -> list[ExchangeOrder]:
        ...

    async def cancel_order(self, exchange_id: str, order_id: str, symbol: str | None) -> ExchangeOrder:
        ...

    async def fetch_balance(self) -> Balance:
        ...


class PaperTradeAdapter(ExchangeAdapter):
    """Adapter whose orders never reach the exchange."""

    def __init__(
        self,
        real_adapter: ExchangeAdapter,
        order_manager: OrderManager,
        *,
        leverage: int = DEFAULT_PAPER_LEVERAGE,
    ) -> None:
        self.real_adapter = real_adapter
        self.order_manager = order_manager
        self.default_leverage = leverage

    @property
    def id(self) -> str:
        return self.real_adapter.id

    def _not_supported(self, operation: str) -> NotSupportedError:
        return NotSupportedError(f"{operation} is not available in paper trading", exchange=self.id)

    # --- delegated to the real exchange -----------------------------------

    async def load_markets(self, reload: bool = False) -> dict[str, dict[str, Any]]:
        return await self.real_adapter.load_markets(reload)

    async def market_id(self, symbol: str) -> str:
        return await self.real_adapter.market_id(symbol)

    async def symbol_for_id(self, market_id: str) -> str:
        return await self.real_adapter.symbol_for_id(market_id)

    def market(self, symbol: str) -> dict[str, Any]:
        return self.real_adapter.market(symbol)

    def find_symbol_format_agnostic(self, symbol: str) -> dict[str, Any] | None:
        return self.real_adapter.find_symbol_format_agnostic(symbol)

    def set_auth(self, api_key: str, secret: str, password: str | None = None) -> None:
        self.real_adapter.set_auth(api_key, secret, password)

    def amount_to_precision(self, symbol: str, amount: float) -> float:
        return self.real_adapter.amount_to_precision(symbol, amount)

    def price_to_precision(self, symbol: str, price: float) -> float:
        return self.real_adapter.price_to_precision(symbol, price)

    async def order_book(self, symbol: str, limit: int | None = None) -> dict[str, Any]:
        return await self.real_adapter.order_book(symbol, limit)

    # --- simulated by the order manager -----------------------------------

    async def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: float | None = None,
        params: ExtraOrderParams | None = None,
    ) -> ExchangeOrder:
        logger.debug(
            "Creating paper order",
            extra={"exchange": self.id, "symbol": symbol, "type": order_type, "side": side},
        )
        return await self.order_manager.create_order(
            self.id, symbol, order_type, side, amount, price, params
        )

    async def cancel_order(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        return await self.order_manager.cancel_order(self.id, order_id, symbol)

    async def order_info(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        return await self.order_manager.order_status(self.id, order_id, symbol)

    async def orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        return await self.order_manager.orders(self.id, symbol)

    async def open_orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        orders = await self.orders(symbol, since, limit)
        return [order for order in orders if order.status == OrderStatus.OPEN]

    async def closed_orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        orders = await self.orders(symbol, since, limit)
        return [order for order in orders if order.status == OrderStatus.CLOSED]

    async def fetch_balance(self) -> Balance:
        return await self.order_manager.fetch_balance()

    # --- simulation defaults ------------------------------------------------

    async def leverage(self, symbol: str) -> dict[str, Any]:
        return {symbol: {"leverage": self.default_leverage}}

    async def change_leverage(self, symbol: str, leverage: int) -> dict[str, Any]:
        return {symbol: {"leverage": leverage}}

    def supports_margin_mode(self) -> bool:
        return False

    async def set_margin_mode(self, symbol: str, mode: str) -> dict[str, Any] | None:
        return None

    def leverage_for_cross_margin(self) -> float:
        return 1.0

    # --- not available with simulated funds --------------------------------

    async def deposit_address(self, code: str, network: str | None = None) -> DepositAddress:
        raise self._not_supported("Deposit address")

    async def deposits(
        self, code: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[Transaction]:
        raise self._not_supported("Deposit history")

    async def withdrawals(
        self, code: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[Transaction]:
        raise self._not_supported("Withdrawal history")

    async def withdraw(
        self,
        code: str,
        amount: float,
        address: str,
        tag: str | None = None,
        network: str | None = None,
    ) -> Transaction:
        raise self._not_supported("Withdrawal")

    async def positions(self) -> list[Position]:
        raise self._not_supported("Positions")

    async def transfer_margin(self, symbol: str, amount: float) -> float:
        raise self._not_supported("Margin transfer")

    async def balance_transfer(self, asset: str, amount: float, transfer_type: int) -> dict[str, Any]:
        raise self._not_supported("Balance transfer")

    async def balance_transfer_history(self, asset: str, since: int) -> dict[str, Any]:
        raise self._not_supported("Balance transfer history")

    async def income(
        self,
        symbol: str | None = None,
        income_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[Income]:
        raise self._not_supported("Income history")

    async def force_orders(
        self,
        symbol: str | None = None,
        auto_close_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[ExchangeOrder]:
        raise self._not_supported("Forced orders")

    async def futures_transfers(self, since: int, asset: str | None = None) -> list[FuturesTransfer]:
        raise self._not_supported("Futures transfers")

    async def close(self) -> None:
        await self.real_adapter.close()
