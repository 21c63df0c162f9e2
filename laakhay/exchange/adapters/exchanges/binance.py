"""Binance spot and USD-M futures adapters."""

from __future__ import annotations

import logging
import time
from typing import Any

import ccxt

from ...core.enums import MarginMode, OrderSide, OrderType, TimeInForce
from ...core.exceptions import (
    ExchangeError,
    InsufficientFundsError,
    OrderNotFoundError,
    RateLimitExceededError,
)
from ...core.params import ExtraOrderParams
from ...models.order import ExchangeOrder, FuturesTransfer, Income, Position
from ...utils.ccxt import extract_error_code
from ..ccxt import CcxtExchangeAdapter

logger = logging.getLogger(__name__)

RECV_WINDOW_MS = 60000
INCOME_PAGE_SIZE = 100
TRANSFER_HISTORY_PAGE_SIZE = 100
# Leverage bracket used when the account never customized leverage
DEFAULT_LEVERAGE_BRACKET = 4

# Message fragments Binance returns without a matching ccxt error class
_MESSAGE_ERRORS: tuple[tuple[str, type[ExchangeError]], ...] = (
    ('"error":{"message":"Not Found"', OrderNotFoundError),
    ("Insufficient balance", InsufficientFundsError),
    ('"code":-9000,"msg":"Only can be requested once within', RateLimitExceededError),
)


def _float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    return float(value)


class BinanceAdapter(CcxtExchangeAdapter):
    """Binance spot."""

    _ORDER_TYPES = {
        OrderType.MARKET: "MARKET",
        OrderType.LIMIT: "LIMIT",
        OrderType.STOP: "STOP_LOSS",
        OrderType.STOP_LIMIT: "STOP_LOSS_LIMIT",
        OrderType.STOP_LOSS_LIMIT: "STOP_LOSS_LIMIT",
    }
    _NATIVE_ORDER_TYPES = {
        "limit": OrderType.LIMIT.value,
        "market": OrderType.MARKET.value,
        "stop_loss": OrderType.STOP.value,
        "stop_loss_limit": OrderType.STOP_LIMIT.value,
    }

    def translate_error(self, exc: ccxt.BaseError) -> ExchangeError:
        message = str(exc)
        for fragment, error_class in _MESSAGE_ERRORS:
            if fragment in message:
                return error_class(message, exchange=self.id, code=extract_error_code(message))
        return super().translate_error(exc)

    def translate_order_type(self, order_type: OrderType) -> str:
        return self._ORDER_TYPES[order_type]

    def normalize_order(self, order: dict[str, Any]) -> dict[str, Any]:
        native_type = order.get("type")
        if not native_type:
            return order
        lowered = native_type.lower()
        return {**order, "type": self._NATIVE_ORDER_TYPES.get(lowered, lowered)}

    def client_order_id(self, params: ExtraOrderParams) -> str | None:
        """Caller correlation id, else broker id plus the current millisecond."""
        if params.client_order_id:
            return params.client_order_id
        if self.broker_id:
            return f"{self.broker_id}{int(time.time() * 1000)}"
        return None

    def order_params(
        self, order_type: OrderType, side: OrderSide, params: ExtraOrderParams
    ) -> dict[str, Any]:
        ccxt_params: dict[str, Any] = {"recvWindow": RECV_WINDOW_MS}
        if params.stop_price is not None:
            ccxt_params["stopPrice"] = params.stop_price
        # Stop-loss price wins over stop price
        if params.stop_loss_price is not None:
            ccxt_params["stopPrice"] = params.stop_loss_price
        if params.quote_order_qty is not None:
            ccxt_params["quoteOrderQty"] = params.quote_order_qty
        client_order_id = self.client_order_id(params)
        if client_order_id:
            ccxt_params["newClientOrderId"] = client_order_id
        return ccxt_params

    async def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: float | None = None,
        params: ExtraOrderParams | None = None,
    ) -> ExchangeOrder:
        params = params or ExtraOrderParams()
        # Pin the generated id so the echoed order carries what we sent
        client_order_id = self.client_order_id(params)
        if client_order_id:
            params = params.with_client_order_id(client_order_id)
        order = await super().create_order(symbol, order_type, side, amount, price, params)
        if client_order_id and not order.client_order_id:
            order = order.model_copy(update={"client_order_id": client_order_id})
        return order

    async def order_info(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        order = await self._call("fetch_order", order_id, symbol, {"recvWindow": RECV_WINDOW_MS})
        return self.parse_order(order)

    async def balance_transfer(self, asset: str, amount: float, transfer_type: int) -> dict[str, Any]:
        """Move funds between spot and futures wallets (Binance transfer types)."""
        return await self._call(
            "sapiPostFuturesTransfer",
            {"asset": asset, "amount": amount, "type": transfer_type},
        )

    async def balance_transfer_history(self, asset: str, since: int) -> dict[str, Any]:
        return await self._call(
            "sapiGetFuturesTransfer",
            {"asset": asset, "startTime": since, "size": TRANSFER_HISTORY_PAGE_SIZE},
        )


class BinanceFuturesAdapter(BinanceAdapter):
    """Binance USD-M perpetual futures."""

    _ORDER_TYPES = {
        OrderType.MARKET: "MARKET",
        OrderType.LIMIT: "LIMIT",
        OrderType.STOP: "STOP_MARKET",
        OrderType.STOP_LIMIT: "STOP",
        OrderType.STOP_LOSS_LIMIT: "STOP",
    }
    _NATIVE_ORDER_TYPES = {
        "limit": OrderType.LIMIT.value,
        "market": OrderType.MARKET.value,
        "stop_market": OrderType.STOP.value,
        "stop": OrderType.STOP_LIMIT.value,
    }
    _TIME_IN_FORCE_TYPES = (OrderType.LIMIT, OrderType.STOP, OrderType.STOP_LIMIT)

    def order_params(
        self, order_type: OrderType, side: OrderSide, params: ExtraOrderParams
    ) -> dict[str, Any]:
        ccxt_params = super().order_params(order_type, side, params)
        if params.reduce_only is not None:
            ccxt_params["reduceOnly"] = params.reduce_only
        if order_type in self._TIME_IN_FORCE_TYPES:
            if params.time_in_force is not None:
                ccxt_params["timeInForce"] = params.time_in_force.value
            elif params.post_only:
                ccxt_params["timeInForce"] = TimeInForce.GTX.value
        if params.position_side is not None:
            ccxt_params["positionSide"] = params.position_side.value
        return ccxt_params

    def _symbol_for(self, market_id: str | None) -> str | None:
        if not market_id:
            return None
        market = self.find_symbol_format_agnostic(market_id)
        return market["symbol"] if market else None

    async def positions(self) -> list[Position]:
        await self.load_markets()
        rows = await self._call("fapiPrivateV2GetPositionRisk", {})
        positions = []
        for row in rows:
            margin_type = row.get("marginType")
            positions.append(
                Position(
                    symbol=self._symbol_for(row.get("symbol")),
                    amount=_float(row.get("positionAmt")),
                    side=(row.get("positionSide") or "").lower() or None,
                    entry_price=_float(row.get("entryPrice")),
                    mark_price=_float(row.get("markPrice")),
                    liquidation_price=_float(row.get("liquidationPrice")),
                    leverage=_float(row.get("leverage"), default=1.0),
                    margin_mode=margin_type,
                    isolated=margin_type != "cross",
                    info=row,
                )
            )
        return positions

    async def leverage(self, symbol: str) -> dict[str, Any]:
        market_id = await self.market_id(symbol)
        leverage: int = 1
        max_leverage: int = 125
        custom_leverage = False

        account = await self._call("fapiPrivateV2GetAccount")
        for position in account.get("positions") or []:
            if position.get("symbol") == market_id and position.get("leverage") is not None:
                leverage = int(position["leverage"])
                custom_leverage = True
                break

        brackets_data = await self._call("fapiPrivateGetLeverageBracket", {"symbol": market_id})
        if isinstance(brackets_data, list):
            brackets_data = brackets_data[0] if brackets_data else {}
        brackets = brackets_data.get("brackets") or []
        if brackets:
            max_leverage = int(brackets[0]["initialLeverage"])
            if not custom_leverage:
                for bracket in brackets:
                    if int(bracket.get("bracket", 0)) == DEFAULT_LEVERAGE_BRACKET:
                        leverage = int(bracket["initialLeverage"])
                        break

        return {market_id: {"leverage": leverage, "maxLeverage": max_leverage}}

    async def change_leverage(self, symbol: str, leverage: int) -> dict[str, Any]:
        market_id = await self.market_id(symbol)
        response = await self._call("fapiPrivatePostLeverage", {"symbol": market_id, "leverage": leverage})
        return {market_id: {"leverage": int(response["leverage"])}}

    async def set_margin_mode(self, symbol: str, mode: str) -> dict[str, Any] | None:
        margin_mode = MarginMode(mode.lower())
        logger.info(f"Setting {margin_mode.value} margin for {symbol} on {self.id}")
        return await self._call("set_margin_mode", margin_mode.value, symbol)

    async def income(
        self,
        symbol: str | None = None,
        income_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[Income]:
        """Income history, paged by start time until a short page or ``until``."""
        request: dict[str, Any] = {}
        if symbol is not None:
            request["symbol"] = await self.market_id(symbol)
        else:
            await self.load_markets()
        if income_type is not None:
            request["incomeType"] = income_type
        if since is not None:
            request["startTime"] = since
        if until is not None:
            request["endTime"] = until
        if limit is not None:
            request["limit"] = limit

        results: list[Income] = []
        last_tran_id: str | None = None
        last_timestamp = since
        while True:
            rows = await self._call("fapiPrivateGetIncome", dict(request))
            processed = 0
            for row in rows:
                tran_id = str(row["tranId"]) if row.get("tranId") is not None else None
                if tran_id is not None and tran_id == last_tran_id:
                    continue
                timestamp = int(row["time"]) if row.get("time") is not None else None
                last_timestamp = timestamp
                last_tran_id = tran_id
                if until is not None and timestamp is not None and timestamp > until:
                    break
                processed += 1
                results.append(
                    Income(
                        symbol=self._symbol_for(row.get("symbol")),
                        income_type=row.get("incomeType") or "",
                        income=_float(row.get("income")),
                        asset=row.get("asset"),
                        timestamp=timestamp,
                        tran_id=tran_id,
                        info=row,
                    )
                )
            exhausted = len(rows) < INCOME_PAGE_SIZE or processed == 0
            past_until = until is not None and last_timestamp is not None and last_timestamp > until
            if exhausted or past_until:
                return results
            request["startTime"] = last_timestamp

    async def force_orders(
        self,
        symbol: str | None = None,
        auto_close_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        limit: int | None = None,
    ) -> list[ExchangeOrder]:
        request: dict[str, Any] = {}
        if symbol is not None:
            request["symbol"] = await self.market_id(symbol)
        if auto_close_type is not None:
            request["autoCloseType"] = auto_close_type
        if since is not None:
            request["startTime"] = since
        if until is not None:
            request["endTime"] = until
        if limit is not None:
            request["limit"] = limit
        rows = await self._call("fapiPrivateGetForceOrders", request)
        return [self.parse_order(self.client.parse_order(row)) for row in rows]

    async def futures_transfers(self, since: int, asset: str | None = None) -> list[FuturesTransfer]:
        """Confirmed transfers into (types 1 and 3) or out of the futures wallet."""
        response = await self.balance_transfer_history(asset or "USDT", since)
        if not response or int(response.get("total") or 0) <= 0:
            return []
        transfers = []
        for row in response.get("rows") or []:
            if row.get("status") != "CONFIRMED":
                continue
            transfer_type = int(row.get("type") or 0)
            transfers.append(
                FuturesTransfer(
                    transfer_id=str(row.get("tranId") or ""),
                    amount=_float(row.get("amount")),
                    asset=row.get("asset") or asset or "USDT",
                    timestamp=int(row.get("timestamp") or 0),
                    type=FuturesTransfer.DEPOSIT if transfer_type in (1, 3) else FuturesTransfer.WITHDRAWAL,
                )
            )
        return transfers
