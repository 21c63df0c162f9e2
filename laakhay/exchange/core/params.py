"""Optional order modifiers passed alongside ``create_order``."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .enums import PositionSide, TimeInForce


@dataclass(frozen=True)
class ExtraOrderParams:
    """Immutable bag of optional order modifiers.

    Every field is independently nullable. Instances are built with the
    ``with_*`` methods, each returning a new value:

        >>> params = ExtraOrderParams().with_stop_price(25000.0).with_reduce_only(True)
        >>> params.stop_price, params.reduce_only
        (25000.0, True)
    """

    stop_price: float | None = None
    stop_loss_price: float | None = None
    quote_order_qty: float | None = None
    reduce_only: bool | None = None
    time_in_force: TimeInForce | None = None
    post_only: bool | None = None
    position_side: PositionSide | None = None
    client_order_id: str | None = None

    def with_stop_price(self, value: float | None) -> ExtraOrderParams:
        return replace(self, stop_price=value)

    def with_stop_loss_price(self, value: float | None) -> ExtraOrderParams:
        return replace(self, stop_loss_price=value)

    def with_quote_order_qty(self, value: float | None) -> ExtraOrderParams:
        return replace(self, quote_order_qty=value)

    def with_reduce_only(self, value: bool | None) -> ExtraOrderParams:
        return replace(self, reduce_only=value)

    def with_time_in_force(self, value: TimeInForce | str | None) -> ExtraOrderParams:
        """Set time in force; strings are validated against ``TimeInForce``."""
        if value is not None and not isinstance(value, TimeInForce):
            value = TimeInForce(value.upper())
        return replace(self, time_in_force=value)

    def with_post_only(self, value: bool | None) -> ExtraOrderParams:
        return replace(self, post_only=value)

    def with_position_side(self, value: PositionSide | str | None) -> ExtraOrderParams:
        if value is not None and not isinstance(value, PositionSide):
            value = PositionSide(value.upper())
        return replace(self, position_side=value)

    def with_client_order_id(self, value: str | None) -> ExtraOrderParams:
        return replace(self, client_order_id=value)
