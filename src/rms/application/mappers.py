"""Domain -> DTO mapping shared by the use-case handlers."""

from __future__ import annotations

from rms.application.dto import OrderDTO, RentalLineDTO, ReservationDTO
from rms.domain.model.cart import CartItem
from rms.domain.model.order import RentalLineItem, RentalOrder
from rms.domain.model.reservation import Reservation


def line_to_dto(item: RentalLineItem | CartItem) -> RentalLineDTO:
    return RentalLineDTO(
        product_name=item.product_name,
        variant_id=item.variant_id,
        quantity=item.quantity.value,
        start=item.period.start.isoformat(),
        end=item.period.end.isoformat(),
        days=item.period.days,
        source=item.source.value,
    )


def order_to_dto(order: RentalOrder) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_name=order.customer_name,
        status=order.status.value,
        items=[line_to_dto(item) for item in order.items],
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        quotation_id=order.quotation_id,
        total_units=order.total_units,
    )


def reservation_to_dto(reservation: Reservation) -> ReservationDTO:
    return ReservationDTO(
        id=reservation.id,  # type: ignore[arg-type]
        product_id=reservation.product_id,
        variant_id=reservation.variant_id,
        order_id=reservation.order_id,
        quantity=reservation.quantity,
        start=reservation.period.start.isoformat(),
        end=reservation.period.end.isoformat(),
        status=reservation.status.value,
    )
