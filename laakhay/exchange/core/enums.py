"""Core enumerations shared by encoders, handlers and adapters.

Architecture:
    String enums so values serialize directly into protocol-client calls
    (ccxt uses the same lowercase strings for sides, types and statuses).

Key Types:
    - ContractKind: Linear vs Inverse vs Quanto arithmetic branch
    - ExchangeType: Spot vs Futures account type
    - OrderType / OrderSide / OrderStatus: Order lifecycle vocabulary
    - TimeInForce / MarginMode / PositionSide: Order and position modifiers
    - LimitKind / LimitBound: Keys into market limits

See Also:
    - Market: Derives ContractKind from its inverse/quanto flags
    - ContractHandler: Branches on ContractKind
"""

from enum import Enum


class ContractKind(str, Enum):
    """How contract value relates to price."""

    LINEAR = "linear"
    INVERSE = "inverse"
    QUANTO = "quanto"

    @classmethod
    def from_flags(cls, is_inverse: bool, is_quanto: bool) -> "ContractKind":
        """Derive the kind from market flags.

        Raises:
            ValueError: If both flags are set
        """
        if is_inverse and is_quanto:
            raise ValueError("A market cannot be both inverse and quanto")
        if is_inverse:
            return cls.INVERSE
        if is_quanto:
            return cls.QUANTO
        return cls.LINEAR


class ExchangeType(str, Enum):
    """Account type the adapter trades on."""

    SPOT = "spot"
    FUTURES = "futures"


class OrderType(str, Enum):
    """Order types in protocol-client vocabulary."""

    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    STOP_LIMIT = "stopLimit"
    STOP_LOSS_LIMIT = "stopLossLimit"

    @classmethod
    def parse(cls, value: "str | OrderType") -> "OrderType":
        """Accept both ``stop-limit`` and ``stopLimit`` spellings."""
        if isinstance(value, cls):
            return value
        normalized = value.replace("-", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        if normalized == "ceilingmarket":
            return cls.MARKET
        raise ValueError(f"Not valid order type {value}")


class OrderSide(str, Enum):
    """Order side."""

    BUY = "buy"
    SELL = "sell"


class OrderStatus(str, Enum):
    """Normalized order status."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    EXPIRED = "expired"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: str | None) -> "OrderStatus | None":
        if value is None:
            return None
        value = value.lower()
        if value == "cancelled":
            return cls.CANCELED
        return cls(value)


class TimeInForce(str, Enum):
    """Time in force values accepted on order creation."""

    GTC = "GTC"
    IOC = "IOC"
    FOK = "FOK"
    GTX = "GTX"


class MarginMode(str, Enum):
    """Futures margin mode."""

    CROSS = "cross"
    ISOLATED = "isolated"


class PositionSide(str, Enum):
    """Hedge-mode position side."""

    BOTH = "BOTH"
    LONG = "LONG"
    SHORT = "SHORT"


class LimitKind(str, Enum):
    """Which market limit is being checked."""

    AMOUNT = "amount"
    PRICE = "price"
    COST = "cost"
    MARKET = "market"


class LimitBound(str, Enum):
    """Lower or upper end of a limit."""

    MIN = "min"
    MAX = "max"
