"""Order and account models parsed from protocol-client payloads."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import OrderSide, OrderStatus, OrderType


def _float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


class ExchangeOrder(BaseModel):
    """Order as reported by an exchange or the paper order manager."""

    id: str = Field(..., min_length=1)
    symbol: str | None = None
    type: OrderType | None = None
    # Exchange spelling when it has no OrderType counterpart
    raw_type: str | None = None
    side: OrderSide | None = None
    status: OrderStatus | None = None
    price: float | None = None
    amount: float | None = None
    filled: float | None = None
    remaining: float | None = None
    cost: float | None = None
    average: float | None = None
    stop_price: float | None = None
    timestamp: int | None = None
    client_order_id: str | None = None
    fee: dict[str, Any] | None = None
    info: dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_ccxt(cls, order: dict[str, Any]) -> ExchangeOrder:
        """Build from a ccxt unified order structure."""
        raw_type = order.get("type")
        try:
            order_type = OrderType.parse(raw_type) if raw_type else None
        except ValueError:
            order_type = None
        return cls(
            id=str(order["id"]),
            symbol=order.get("symbol"),
            type=order_type,
            raw_type=raw_type,
            side=OrderSide(order["side"]) if order.get("side") else None,
            status=OrderStatus.parse(order.get("status")),
            price=_float(order.get("price")),
            amount=_float(order.get("amount")),
            filled=_float(order.get("filled")),
            remaining=_float(order.get("remaining")),
            cost=_float(order.get("cost")),
            average=_float(order.get("average")),
            stop_price=_float(order.get("stopPrice")),
            timestamp=order.get("timestamp"),
            client_order_id=order.get("clientOrderId"),
            fee=order.get("fee"),
            info=order.get("info") or {},
        )


class Balance(BaseModel):
    """Free/used/total amounts per asset."""

    free: dict[str, float] = Field(default_factory=dict)
    used: dict[str, float] = Field(default_factory=dict)
    total: dict[str, float] = Field(default_factory=dict)
    info: dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_ccxt(cls, balance: dict[str, Any]) -> Balance:
        def clean(section: dict[str, Any] | None) -> dict[str, float]:
            return {asset: float(value) for asset, value in (section or {}).items() if value is not None}

        return cls(
            free=clean(balance.get("free")),
            used=clean(balance.get("used")),
            total=clean(balance.get("total")),
            info=balance.get("info") or {},
        )

    def free_of(self, asset: str) -> float:
        return self.free.get(asset, 0.0)


class Position(BaseModel):
    """Open futures position."""

    symbol: str | None = None
    amount: float = 0.0
    side: str | None = None
    entry_price: float | None = None
    mark_price: float | None = None
    liquidation_price: float | None = None
    leverage: float | None = None
    margin_mode: str | None = None
    isolated: bool = False
    info: dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_ccxt(cls, position: dict[str, Any]) -> Position:
        margin_mode = position.get("marginMode") or position.get("marginType")
        return cls(
            symbol=position.get("symbol"),
            amount=_float(position.get("contracts")) or 0.0,
            side=(position.get("side") or None),
            entry_price=_float(position.get("entryPrice")),
            mark_price=_float(position.get("markPrice")),
            liquidation_price=_float(position.get("liquidationPrice")),
            leverage=_float(position.get("leverage")),
            margin_mode=margin_mode,
            isolated=margin_mode is not None and margin_mode != "cross",
            info=position.get("info") or {},
        )


class Transaction(BaseModel):
    """Deposit or withdrawal record."""

    id: str | None = None
    txid: str | None = None
    type: str | None = None
    currency: str | None = None
    amount: float | None = None
    address: str | None = None
    tag: str | None = None
    status: str | None = None
    timestamp: int | None = None
    fee: dict[str, Any] | None = None
    info: dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_ccxt(cls, tx: dict[str, Any]) -> Transaction:
        return cls(
            id=tx.get("id"),
            txid=tx.get("txid"),
            type=tx.get("type"),
            currency=tx.get("currency"),
            amount=_float(tx.get("amount")),
            address=tx.get("address"),
            tag=tx.get("tag"),
            status=tx.get("status"),
            timestamp=tx.get("timestamp"),
            fee=tx.get("fee"),
            info=tx.get("info") or {},
        )


class DepositAddress(BaseModel):
    currency: str
    address: str
    tag: str | None = None
    network: str | None = None
    info: dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(frozen=True)


class Income(BaseModel):
    """Futures income entry (funding, realized pnl, commission...)."""

    symbol: str | None = None
    income_type: str
    income: float
    asset: str | None = None
    timestamp: int | None = None
    tran_id: str | None = None
    info: dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(frozen=True)


class FuturesTransfer(BaseModel):
    """Confirmed transfer into or out of the futures wallet."""

    transfer_id: str
    amount: float
    asset: str
    timestamp: int
    type: str

    model_config = ConfigDict(frozen=True)

    DEPOSIT: ClassVar[str] = "deposit"
    WITHDRAWAL: ClassVar[str] = "withdrawal"
