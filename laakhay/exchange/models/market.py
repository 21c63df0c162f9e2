"""Market metadata model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.enums import ContractKind, LimitBound, LimitKind


class MinMax(BaseModel):
    """Lower/upper bound pair; either end may be missing."""

    min: float | None = None
    max: float | None = None

    model_config = ConfigDict(frozen=True)

    def get(self, bound: LimitBound) -> float | None:
        return self.min if bound == LimitBound.MIN else self.max


class MarketLimits(BaseModel):
    """Exchange limits for one market."""

    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)
    market: MinMax = Field(default_factory=MinMax)

    model_config = ConfigDict(frozen=True)

    def get(self, kind: LimitKind) -> MinMax:
        return getattr(self, kind.value)


class Precision(BaseModel):
    """Amount/price precision as reported by the protocol client."""

    amount: float | None = None
    price: float | None = None

    model_config = ConfigDict(frozen=True)


class Market(BaseModel):
    """One tradeable market on one exchange.

    Immutable for a cache generation. A refresh builds new instances and
    replaces the whole index; fields are never mutated in place.
    """

    internal_id: str = Field(..., min_length=1)
    native_symbol: str = Field(..., min_length=1)
    market_id: str = Field(..., min_length=1)
    base: str
    quote: str
    base_id: str | None = None
    quote_id: str | None = None
    precision: Precision = Field(default_factory=Precision)
    limits: MarketLimits = Field(default_factory=MarketLimits)
    multiplier: float = 1.0
    is_inverse: bool = False
    is_quanto: bool = False
    max_leverage: float | None = None
    active: bool = True
    short: str | None = None
    trade_view_symbol: str | None = None
    reference_symbol: str | None = None
    units_investment: str | None = None
    units_amount: str | None = None
    info: dict[str, Any] = Field(default_factory=dict, repr=False)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @model_validator(mode="after")
    def validate_contract_flags(self) -> Market:
        """Inverse and quanto are mutually exclusive."""
        if self.is_inverse and self.is_quanto:
            raise ValueError("market cannot be both inverse and quanto")
        return self

    @property
    def contract_kind(self) -> ContractKind:
        return ContractKind.from_flags(self.is_inverse, self.is_quanto)

    @property
    def display_symbol(self) -> str:
        """``BASE/QUOTE`` form of the market."""
        return f"{self.base}/{self.quote}"
