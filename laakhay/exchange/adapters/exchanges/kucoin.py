"""KuCoin spot adapter.

Partner headers are added by the client (``PartnerSignatureMixin``); this
adapter only adjusts order creation and cancellation.
"""

from __future__ import annotations

import time
from typing import Any

from ...core.enums import OrderSide, OrderType
from ...core.exceptions import InvalidFormatError
from ...core.params import ExtraOrderParams
from ...models.order import ExchangeOrder
from ..ccxt import CcxtExchangeAdapter


class KucoinAdapter(CcxtExchangeAdapter):
    """KuCoin spot."""

    def translate_order_type(self, order_type: OrderType) -> str:
        # Stop-limit orders are limit orders carrying a stop trigger
        if order_type in (OrderType.STOP_LIMIT, OrderType.STOP_LOSS_LIMIT):
            return OrderType.LIMIT.value
        return order_type.value

    def order_params(
        self, order_type: OrderType, side: OrderSide, params: ExtraOrderParams
    ) -> dict[str, Any]:
        if order_type == OrderType.STOP_LIMIT and params.stop_price is None:
            raise InvalidFormatError(
                "Stop price not set in stop-limit order creation", exchange=self.id
            )
        ccxt_params: dict[str, Any] = {}
        if params.stop_price is not None:
            ccxt_params["stopPrice"] = params.stop_price
            # entry: triggers at or above the stop price, loss: at or below
            ccxt_params["stop"] = "entry" if side == OrderSide.BUY else "loss"
        if params.client_order_id:
            ccxt_params["clientOid"] = f"{params.client_order_id}{int(time.time() * 1000)}"
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
        order = await super().create_order(symbol, order_type, side, amount, price, params)
        # Report the requested type, not the limit order it was sent as
        return order.model_copy(update={"type": OrderType.parse(order_type)})

    async def cancel_order(self, order_id: str, symbol: str | None = None) -> ExchangeOrder:
        # KuCoin answers a cancel with ids only; report the resulting order state
        await self._call("cancel_order", order_id, symbol)
        return await self.order_info(order_id, symbol)
