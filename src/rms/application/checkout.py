"""Application service: Checkout use case.

The checkout gate. Turns the customer's cart into a confirmed rental
order:

1. Fail fast if any cart line is no longer available.
2. Persist the order as DRAFT to obtain its ID.
3. Commit one reservation per line through the ReservationManager
   (each one atomically re-checks availability).
4. If any reservation fails, cancel the ones already made and the
   order itself, then re-raise. No reservation outlives a failed
   checkout.
5. Confirm the order and clear the cart.
"""

from __future__ import annotations

import logging

from rms.application.dto import OrderDTO
from rms.application.mappers import order_to_dto
from rms.domain.exceptions import DomainException, ValidationError
from rms.domain.model.order import DirectLineItem, RentalOrder
from rms.domain.repository.cart_repository import CartRepository
from rms.domain.repository.order_repository import OrderRepository
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.reservation_repository import ReservationRepository
from rms.domain.service.availability_calculator import AvailabilityCalculator
from rms.domain.service.reservation_manager import (
    DEFAULT_CONFLICT_RETRIES,
    ReservationManager,
)

logger = logging.getLogger(__name__)


class CheckoutHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo
        self._conflict_retries = conflict_retries

    def handle(self, customer_name: str) -> OrderDTO:
        cart = self._cart_repo.get_for_customer(customer_name)
        if cart is None or cart.is_empty:
            raise ValidationError("Cart is empty")

        order = RentalOrder.create(
            customer_name=customer_name,
            items=[
                DirectLineItem(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    period=item.period,
                    variant_id=item.variant_id,
                )
                for item in cart.items
            ],
        )

        place_order(
            order,
            self._order_repo,
            self._product_repo,
            self._reservation_repo,
            self._conflict_retries,
        )

        cart.clear()
        self._cart_repo.save(cart)
        return order_to_dto(order)


def place_order(
    order: RentalOrder,
    order_repo: OrderRepository,
    product_repo: ProductRepository,
    reservation_repo: ReservationRepository,
    conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
) -> None:
    """Persist ``order``, reserve every line and confirm it, or leave
    nothing reserved and the order CANCELLED."""
    calculator = AvailabilityCalculator(product_repo, reservation_repo)
    manager = ReservationManager(reservation_repo, calculator, conflict_retries)

    for item in order.items:
        result = calculator.check(
            item.product_id, item.period, item.quantity.value, variant_id=item.variant_id
        )
        if not result.available:
            raise ValidationError(
                f'"{item.product_name}" is not available for the selected dates. '
                f"{result.message}"
            )

    order_repo.save(order)

    try:
        for item in order.items:
            manager.create_reservation(
                product_id=item.product_id,
                order_id=order.id,  # type: ignore[arg-type]
                quantity=item.quantity.value,
                period=item.period,
                variant_id=item.variant_id,
            )
    except DomainException:
        logger.warning("Rolling back reservations of order #%s", order.id)
        _release_reservations(manager, order.id)  # type: ignore[arg-type]
        order.cancel()
        order_repo.save(order)
        raise

    order.confirm()
    order_repo.save(order)
    logger.info("Order #%s confirmed with %d line(s)", order.id, len(order.items))


def _release_reservations(manager: ReservationManager, order_id: int) -> None:
    """Best-effort release during rollback; the caller re-raises the
    original failure either way."""
    try:
        manager.cancel_order_reservations(order_id)
    except DomainException:
        # The order is still marked CANCELLED, and cancelling it again
        # releases whatever is left once the store is back.
        logger.exception("Could not release reservations of order #%s", order_id)
