"""Inverse and quanto contract arithmetic (BitMEX-style exchanges).

Contract value is ``price**k * amount * multiplier`` where ``k = -1`` for
inverse markets and ``k = +1`` for quanto and linear markets on the same
exchange. Solving for amount or price inverts the exponent.

Degenerate prices:
    Raising zero to ``-1`` has no finite value. Every powered price goes
    through ``powered_price``, which maps that case (and any overflow to
    infinity) to ``0.0`` instead of raising or returning ``inf``/``nan``.
"""

from __future__ import annotations

import math

from ..core.enums import MarginMode
from ..models.market import Market, MarketLimits
from .linear import ContractHandler


def powered_price(price: float, power: int) -> float:
    """``price ** power`` with infinities clamped to zero.

    Examples:
        >>> powered_price(10000.0, -1)
        0.0001
        >>> powered_price(0.0, -1)
        0.0
    """
    try:
        value = float(price) ** power
    except (ZeroDivisionError, OverflowError):
        return 0.0
    if math.isinf(value) or math.isnan(value):
        return 0.0
    return value


def contract_power(market: Market) -> int:
    """Exponent applied to prices: -1 for inverse markets, 1 otherwise."""
    return -1 if market.is_inverse else 1


class InverseContractHandler(ContractHandler):
    """Arithmetic for exchanges listing inverse/quanto contracts."""

    default_margin_mode = MarginMode.ISOLATED

    def _market(self, symbol: str) -> tuple[Market, int]:
        market = self.encoder.market(symbol)
        return market, contract_power(market)

    # --- sizing ----------------------------------------------------------

    def position_size(self, symbol: str, amount: float, price: float) -> float:
        market, power = self._market(symbol)
        if price == 0:
            return 0.0
        return powered_price(price, power) * amount * market.multiplier

    def order_cost(self, symbol: str, amount: float, price: float) -> float:
        market, power = self._market(symbol)
        return powered_price(price, power) * amount * market.multiplier

    def amount_from_position_size(self, symbol: str, position_size: float, price: float) -> float:
        market, power = self._market(symbol)
        if market.multiplier == 0:
            return 0.0
        return powered_price(price, -power) * position_size / market.multiplier

    def price_from_cost_amount(self, symbol: str, cost: float, amount: float) -> float:
        market, power = self._market(symbol)
        denominator = amount * market.multiplier
        if denominator == 0:
            return 0.0
        return powered_price(cost / denominator, power)

    def real_investment(self, symbol: str, amount: float, price: float) -> float:
        market, power = self._market(symbol)
        return powered_price(price, power) * amount * market.multiplier

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
        market, power = self._market(symbol)
        entry = powered_price(entry_avg_price, power)
        exit_ = powered_price(exit_avg_price, power)
        unexited = (entry_qty - exit_qty) * entry
        if is_short:
            profit = (entry - exit_) * exit_qty - unexited
        else:
            profit = (exit_ - entry) * exit_qty - unexited
        return profit * power * market.multiplier

    def current_gross_profit(
        self,
        symbol: str,
        is_short: bool,
        entry_price: float,
        current_price: float,
        remaining_qty: float,
    ) -> float:
        market, power = self._market(symbol)
        entry = powered_price(entry_price, power)
        current = powered_price(current_price, power)
        if is_short:
            profit = (entry - current) * remaining_qty
        else:
            profit = (current - entry) * remaining_qty
        return profit * power * market.multiplier

    def gross_profit_from_totals(
        self,
        symbol: str,
        is_short: bool,
        exit_avg_price: float,
        exit_amount: float,
        entry_avg_price: float,
        entry_amount: float,
    ) -> float:
        _, power = self._market(symbol)
        exit_total = powered_price(exit_avg_price, power) * exit_amount
        entry_total = powered_price(entry_avg_price, power) * entry_amount
        profit = entry_total - exit_total if is_short else exit_total - entry_total
        return profit * power

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
        _, power = self._market(symbol)
        current = powered_price(current_price, power)
        entry = powered_price(entry_avg_price, power)
        exit_ = powered_price(exit_avg_price, power)
        pnl = remaining_amount * (current - entry) + exit_amount * (exit_ - entry)
        return -pnl * power if is_short else pnl * power

    # --- fees ------------------------------------------------------------

    def trade_commission(
        self,
        commission_asset: str,
        commission: float,
        price: float,
        quote_asset: str,
    ) -> float:
        """Commissions are charged in the settlement asset already."""
        return commission

    def funding_fee(self, income: float, is_short: bool) -> float:
        return income if is_short else -income

    # --- limits ----------------------------------------------------------

    def market_limits(self, symbol: str) -> MarketLimits:
        """Limits with ``amount`` and ``cost`` swapped on inverse markets.

        BitMEX reports inverse contract sizes in quote currency, so what ccxt
        labels ``amount`` bounds the order cost and vice versa.
        """
        market = self.encoder.market(symbol)
        if not market.is_inverse:
            return market.limits
        return market.limits.model_copy(
            update={"amount": market.limits.cost, "cost": market.limits.amount}
        )
