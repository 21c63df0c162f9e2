"""Linear contract arithmetic.

Linear markets (spot pairs and USD-margined perpetuals) value a position at
``amount * price``. Every operation takes the internal symbol so exchange
specific subclasses can consult the market; the linear math only needs the
market for limits.

Architecture:
    ContractHandler is the default handler. ``InverseContractHandler``
    overrides the price-dependent operations for inverse/quanto markets.
    ``handler_for`` picks one from the exchange capability table.

See Also:
    - MarketEncoder.market: source of Market snapshots
    - handlers.factory.handler_for: capability-based selection
"""

from __future__ import annotations

import logging
from decimal import Decimal

from ..core.capabilities import DEFAULT_CAPABILITIES, ExchangeCapabilities
from ..core.enums import LimitBound, LimitKind, MarginMode
from ..markets.encoder import MarketEncoder
from ..models.market import MarketLimits

logger = logging.getLogger(__name__)

FUNDING_FEE_INCOME_TYPE = "FUNDING_FEE"


class ContractHandler:
    """Arithmetic for linear contracts."""

    default_margin_mode: MarginMode = MarginMode.CROSS
    funding_fee_income_type: str = FUNDING_FEE_INCOME_TYPE

    def __init__(
        self,
        encoder: MarketEncoder,
        capabilities: ExchangeCapabilities = DEFAULT_CAPABILITIES,
    ) -> None:
        self.encoder = encoder
        self.capabilities = capabilities

    @property
    def exchange_name(self) -> str:
        return self.encoder.exchange_name

    # --- sizing ----------------------------------------------------------

    def position_size(self, symbol: str, amount: float, price: float) -> float:
        return amount * price

    def order_cost(self, symbol: str, amount: float, price: float) -> float:
        return amount * price

    def amount_from_position_size(self, symbol: str, position_size: float, price: float) -> float:
        if price == 0:
            return 0.0
        return position_size / price

    def price_from_cost_amount(self, symbol: str, cost: float, amount: float) -> float:
        if amount == 0:
            return 0.0
        return cost / amount

    def real_investment(self, symbol: str, amount: float, price: float) -> float:
        return amount * price

    def real_investment_from_position_size(self, symbol: str, position_size: float) -> float:
        return position_size

    # --- profit ----------------------------------------------------------

    def gross_profit(
        self,
        symbol: str,
        is_short: bool,
        entry_avg_price: float,
        exit_avg_price: float,
        entry_qty: float,
        exit_qty: float,
    ) -> float:
        """Realized profit; unexited quantity counts against the entry cost."""
        unexited = (entry_qty - exit_qty) * entry_avg_price
        if is_short:
            return (entry_avg_price - exit_avg_price) * exit_qty - unexited
        return (exit_avg_price - entry_avg_price) * exit_qty - unexited

    def current_gross_profit(
        self,
        symbol: str,
        is_short: bool,
        entry_price: float,
        current_price: float,
        remaining_qty: float,
    ) -> float:
        """Unrealized profit of the remaining quantity at ``current_price``."""
        if is_short:
            return (entry_price - current_price) * remaining_qty
        return (current_price - entry_price) * remaining_qty

    def gross_profit_from_totals(
        self,
        symbol: str,
        is_short: bool,
        exit_avg_price: float,
        exit_amount: float,
        entry_avg_price: float,
        entry_amount: float,
    ) -> float:
        exit_total = exit_avg_price * exit_amount
        entry_total = entry_avg_price * entry_amount
        return entry_total - exit_total if is_short else exit_total - entry_total

    def profit_and_loss(
        self,
        symbol: str,
        is_short: bool,
        remaining_amount: float,
        current_price: float,
        entry_avg_price: float,
        exit_avg_price: float,
        exit_amount: float,
    ) -> float:
        """Unrealized plus realized P&L of a position."""
        pnl = remaining_amount * (current_price - entry_avg_price) + exit_amount * (
            exit_avg_price - entry_avg_price
        )
        return -pnl if is_short else pnl

    # --- fees ------------------------------------------------------------

    def trade_commission(
        self,
        commission_asset: str,
        commission: float,
        price: float,
        quote_asset: str,
    ) -> float:
        """Commission in quote asset terms."""
        if commission_asset == quote_asset:
            return commission
        return commission * price

    def funding_fee(self, income: float, is_short: bool) -> float:
        """Funding income already carries the right sign on linear exchanges."""
        return income

    # --- limits ----------------------------------------------------------

    def market_limits(self, symbol: str) -> MarketLimits:
        """Limits of the market.

        Raises:
            MarketNotFoundError: If the market is not in the current snapshot
        """
        return self.encoder.market(symbol).limits

    def check_limit(
        self,
        symbol: str,
        limit: LimitKind | str,
        bound: LimitBound | str,
        value: float,
    ) -> bool:
        """Whether ``value`` satisfies one limit bound.

        Missing limits always pass; a zero value never passes a present limit.
        """
        limit_value = self.market_limits(symbol).get(LimitKind(limit)).get(LimitBound(bound))
        if limit_value is None:
            return True
        if value == 0:
            return False
        if LimitBound(bound) == LimitBound.MAX:
            return value <= limit_value
        return value >= limit_value

    def max_amounts_for_market_order(self, symbol: str, total_amount: float) -> list[float]:
        """Split a market order into chunks the exchange accepts.

        Examples:
            With a market max of 100, 250 becomes ``[100.0, 100.0, 50.0]``.
        """
        if not self.capabilities.splits_market_orders or total_amount <= 0:
            return [total_amount]
        if self.check_limit(symbol, LimitKind.MARKET, LimitBound.MAX, total_amount):
            return [total_amount]

        max_amount = self.market_limits(symbol).market.max
        if not max_amount or max_amount <= 0:
            return [total_amount]
        # Decimal keeps the chunks summing exactly to the requested amount
        remaining = Decimal(str(total_amount))
        step = Decimal(str(max_amount))
        amounts: list[float] = []
        while remaining > 0:
            chunk = min(step, remaining)
            amounts.append(float(chunk))
            remaining -= chunk
        logger.debug(
            "Split market order",
            extra={"exchange": self.exchange_name, "symbol": symbol, "chunks": len(amounts)},
        )
        return amounts
