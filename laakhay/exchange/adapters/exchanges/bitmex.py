"""BitMEX adapter (inverse and quanto perpetuals, XBt wallet)."""

from __future__ import annotations

import logging
import time
from typing import Any

from ...core.enums import MarginMode, OrderSide, OrderType
from ...core.params import ExtraOrderParams
from ...handlers.linear import FUNDING_FEE_INCOME_TYPE
from ...models.order import ExchangeOrder, Income, Position
from ..ccxt import CcxtExchangeAdapter

logger = logging.getLogger(__name__)

SATOSHIS_PER_XBT = 10**8
ORDER_TEXT = "Sent from laakhay-exchange"
POST_ONLY_EXEC_INST = "ParticipateDoNotInitiate"
MAX_LEVERAGE = 100.0
INCOME_PAGE_SIZE = 500
INCOME_RECORD_LIMIT = 100000

# BitMEX execType -> platform income type
INCOME_TYPES = {"Funding": FUNDING_FEE_INCOME_TYPE}


class BitmexAdapter(CcxtExchangeAdapter):
    """BitMEX derivatives."""

    def order_params(
        self, order_type: OrderType, side: OrderSide, params: ExtraOrderParams
    ) -> dict[str, Any]:
        ccxt_params: dict[str, Any] = {"text": ORDER_TEXT}
        if order_type != OrderType.MARKET and params.post_only:
            ccxt_params["execInst"] = POST_ONLY_EXEC_INST
        if params.client_order_id:
            ccxt_params["clOrdID"] = f"{params.client_order_id}{int(time.time() * 100)}"
        if params.stop_price is not None:
            ccxt_params["stopPx"] = params.stop_price
        return ccxt_params

    async def positions(self) -> list[Position]:
        await self.load_markets()
        rows = await self._call("privateGetPosition")
        positions = []
        for row in rows:
            cross_margin = bool(row.get("crossMargin", False))
            positions.append(
                Position(
                    symbol=self.client.safe_symbol(row.get("symbol")),
                    amount=float(row.get("currentQty") or 0.0),
                    side="both",
                    entry_price=row.get("avgEntryPrice"),
                    mark_price=row.get("markPrice"),
                    liquidation_price=row.get("liquidationPrice"),
                    leverage=row.get("leverage"),
                    margin_mode=MarginMode.CROSS.value if cross_margin else MarginMode.ISOLATED.value,
                    isolated=not cross_margin,
                    info=row,
                )
            )
        return positions

    async def leverage(self, symbol: str) -> dict[str, Any]:
        for position in await self.positions():
            if position.symbol == symbol:
                return {"leverage": position.leverage, "maxLeverage": MAX_LEVERAGE}
        return {}

    async def change_leverage(self, symbol: str, leverage: int) -> dict[str, Any]:
        market_id = await self.market_id(symbol)
        response = await self._call(
            "privatePostPositionLeverage", {"symbol": market_id, "leverage": leverage}
        )
        return {market_id: {"leverage": response["leverage"]}}

    def leverage_for_cross_margin(self) -> float:
        # Leverage 0 selects cross margin on BitMEX
        return 0.0

    async def set_margin_mode(self, symbol: str, mode: str) -> dict[str, Any] | None:
        market_id = await self.market_id(symbol)
        response = await self._call(
            "privatePostPositionIsolate",
            {"symbol": market_id, "enabled": MarginMode(mode.lower()) != MarginMode.CROSS},
        )
        margin_mode = MarginMode.CROSS if response.get("crossMargin") else MarginMode.ISOLATED
        return {market_id: {"marginMode": margin_mode.value}}

    async def transfer_margin(self, symbol: str, amount: float) -> float:
        """Add (or remove, when negative) isolated margin; returns maintenance margin in XBT."""
        market_id = await self.market_id(symbol)
        response = await self._call(
            "privatePostPositionTransferMargin",
            {"symbol": market_id, "amount": int(round(amount * SATOSHIS_PER_XBT))},
        )
        return float(response["maintMargin"]) / SATOSHIS_PER_XBT

    async def income(
        self,
        symbol: str | None = None,
        income_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[Income]:
        """Income from executions, paged forward from ``since``."""
        params: dict[str, Any] = {}
        if income_type is not None:
            native_types = [key for key, value in INCOME_TYPES.items() if value == income_type]
            params["filter"] = {"execType": native_types[0] if native_types else income_type}
        if until is not None:
            params["endTime"] = until

        results: list[Income] = []
        last_trade_id = None
        remaining = INCOME_RECORD_LIMIT
        while remaining > 0:
            trades = await self._call("fetch_my_trades", symbol, since, limit or INCOME_PAGE_SIZE, params)
            if not trades or (len(trades) == 1 and trades[0]["id"] == last_trade_id):
                break
            for trade in trades:
                if trade["id"] == last_trade_id:
                    continue
                last_trade_id = trade["id"]
                since = trade["timestamp"]
                remaining -= 1
                info = trade.get("info") or {}
                exec_type = info.get("execType")
                results.append(
                    Income(
                        symbol=symbol,
                        income_type=INCOME_TYPES.get(exec_type, exec_type or ""),
                        income=float((trade.get("fee") or {}).get("cost") or 0.0),
                        asset="XBT",
                        timestamp=trade["timestamp"],
                        tran_id=str(trade["id"]),
                        info=info,
                    )
                )
                if remaining == 0:
                    break
        return results

    async def force_orders(
        self,
        symbol: str | None = None,
        auto_close_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[ExchangeOrder]:
        """Liquidation executions reported as closed orders; BitMEX has no ADL history."""
        if auto_close_type == "ADL":
            return []
        params: dict[str, Any] = {"filter": {"text": "Liquidation"}}
        if until is not None:
            params["endTime"] = until
        trades = await self._call("fetch_my_trades", symbol, since, limit, params)
        orders = []
        for trade in trades:
            orders.append(
                ExchangeOrder(
                    id=f"trade_{trade['id']}",
                    symbol=trade.get("symbol"),
                    type=OrderType.parse(trade["type"]) if trade.get("type") else None,
                    side=OrderSide(trade["side"]) if trade.get("side") else None,
                    status="closed",
                    price=trade.get("price"),
                    amount=trade.get("amount"),
                    filled=trade.get("amount"),
                    remaining=0.0,
                    cost=trade.get("cost"),
                    average=trade.get("price"),
                    timestamp=trade.get("timestamp"),
                    info=trade,
                )
            )
        return orders
