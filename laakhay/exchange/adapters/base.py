"""Uniform exchange adapter interface.

Architecture:
    ``ExchangeAdapter`` is the single capability interface every exchange
    (and the paper-trade decorator) implements. It provides:
    - Abstract methods for the operations every adapter must carry
      (markets, symbols, precision, orders, balance, funding)
    - Defaults for futures-only operations that raise ``NotSupportedError``
    - Async context manager support

Design Decisions:
    - One flat interface: exchange quirks live in concrete adapters, the
      paper-trade layer wraps by composition, not subclassing
    - Order results are ``ExchangeOrder`` models; raw ccxt dicts never leak
      out of order operations
    - Symbols are native (ccxt) symbols; internal ids are translated by the
      market encoder before they reach an adapter

See Also:
    - CcxtExchangeAdapter: ccxt-backed implementation
    - PaperTradeAdapter: simulated order lifecycle over a real adapter
    - AdapterRegistry: builds adapters by normalized exchange id
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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


class ExchangeAdapter(ABC):
    """Abstract trading surface for one exchange account."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Normalized exchange id (``binance``, ``binancefutures``...)."""

    # --- markets and symbols ---------------------------------------------

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> dict[str, dict[str, Any]]:
        """Load protocol-client markets keyed by native symbol."""

    @abstractmethod
    async def market_id(self, symbol: str) -> str:
        """Exchange market id for a native symbol."""

    @abstractmethod
    async def symbol_for_id(self, market_id: str) -> str:
        """Native symbol for an exchange market id."""

    @abstractmethod
    def market(self, symbol: str) -> dict[str, Any]:
        """Raw market for a native symbol; markets must be loaded."""

    @abstractmethod
    def find_symbol_format_agnostic(self, symbol: str) -> dict[str, Any] | None:
        """Raw market for a market id or native symbol, None when unknown."""

    @abstractmethod
    def set_auth(self, api_key: str, secret: str, password: str | None = None) -> None:
        """Replace the credentials used for private calls."""

    @abstractmethod
    def amount_to_precision(self, symbol: str, amount: float) -> float:
        pass

    @abstractmethod
    def price_to_precision(self, symbol: str, price: float) -> float:
        pass

    # --- orders ----------------------------------------------------------

    @abstractmethod
    async def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: float | None = None,
        params: ExtraOrderParams | None = None,
    ) -> ExchangeOrder:
        """Place an order.

        Args:
            symbol: Native symbol
            order_type: ``OrderType`` value or spelling accepted by ``OrderType.parse``
            side: ``buy`` or ``sell``
            amount: Order amount in exchange units
            price: Limit price, ignored for market orders
            params: Optional order modifiers
        """

    @abstractmethod
    async def cancel_order(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        pass

    @abstractmethod
    async def order_info(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        pass

    @abstractmethod
    async def orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        pass

    @abstractmethod
    async def open_orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        pass

    @abstractmethod
    async def closed_orders(
        self, symbol: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[ExchangeOrder]:
        pass

    @abstractmethod
    async def order_book(self, symbol: str, limit: int | None = None) -> dict[str, Any]:
        pass

    # --- account ---------------------------------------------------------

    @abstractmethod
    async def fetch_balance(self) -> Balance:
        pass

    @abstractmethod
    async def deposit_address(self, code: str, network: str | None = None) -> DepositAddress:
        pass

    @abstractmethod
    async def deposits(
        self, code: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[Transaction]:
        pass

    @abstractmethod
    async def withdrawals(
        self, code: str | None = None, since: int | None = None, limit: int | None = None
    ) -> list[Transaction]:
        pass

    @abstractmethod
    async def withdraw(
        self,
        code: str,
        amount: float,
        address: str,
        tag: str | None = None,
        network: str | None = None,
    ) -> Transaction:
        pass

    # --- futures ---------------------------------------------------------

    async def positions(self) -> list[Position]:
        raise NotSupportedError(f"Positions are not supported on {self.id}", exchange=self.id)

    async def leverage(self, symbol: str) -> dict[str, Any]:
        """Current and maximum leverage for a symbol."""
        raise NotSupportedError(f"Leverage is not supported on {self.id}", exchange=self.id)

    async def change_leverage(self, symbol: str, leverage: int) -> dict[str, Any]:
        raise NotSupportedError(f"Changing leverage is not supported on {self.id}", exchange=self.id)

    def supports_margin_mode(self) -> bool:
        return False

    async def set_margin_mode(self, symbol: str, mode: str) -> dict[str, Any] | None:
        raise NotSupportedError(f"Margin mode is not supported on {self.id}", exchange=self.id)

    def leverage_for_cross_margin(self) -> float:
        """Leverage value that selects cross margin on this exchange."""
        return 1.0

    async def transfer_margin(self, symbol: str, amount: float) -> float:
        raise NotSupportedError(f"Margin transfer is not supported on {self.id}", exchange=self.id)

    async def balance_transfer(self, asset: str, amount: float, transfer_type: int) -> dict[str, Any]:
        raise NotSupportedError(f"Balance transfer is not supported on {self.id}", exchange=self.id)

    async def balance_transfer_history(self, asset: str, since: int) -> dict[str, Any]:
        raise NotSupportedError(
            f"Balance transfer history is not supported on {self.id}", exchange=self.id
        )

    async def income(
        self,
        symbol: str | None = None,
        income_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[Income]:
        raise NotSupportedError(f"Income history is not supported on {self.id}", exchange=self.id)

    async def force_orders(
        self,
        symbol: str | None = None,
        auto_close_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[ExchangeOrder]:
        raise NotSupportedError(f"Forced orders are not supported on {self.id}", exchange=self.id)

    async def futures_transfers(self, since: int, asset: str | None = None) -> list[FuturesTransfer]:
        raise NotSupportedError(f"Futures transfers are not supported on {self.id}", exchange=self.id)

    # --- lifecycle -------------------------------------------------------

    @abstractmethod
    async def close(self) -> None:
        """Release protocol-client resources."""

    async def __aenter__(self) -> ExchangeAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
