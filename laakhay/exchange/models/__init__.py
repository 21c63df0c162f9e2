"""Data models for markets, orders and accounts.

Architecture:
    Pydantic v2 models, all frozen. Markets are replaced wholesale on cache
    refresh; order/account models are parsed from ccxt unified payloads.

Model Categories:
    - Markets: Market, MarketLimits, MinMax, Precision
    - Orders: ExchangeOrder
    - Accounts: Balance, Position, Transaction, DepositAddress, Income, FuturesTransfer
"""

from .market import Market, MarketLimits, MinMax, Precision
from .order import (
    Balance,
    DepositAddress,
    ExchangeOrder,
    FuturesTransfer,
    Income,
    Position,
    Transaction,
)

__all__ = [
    "Balance",
    "DepositAddress",
    "ExchangeOrder",
    "FuturesTransfer",
    "Income",
    "Market",
    "MarketLimits",
    "MinMax",
    "Position",
    "Precision",
    "Transaction",
]
