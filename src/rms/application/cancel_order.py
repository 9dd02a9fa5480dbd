"""Application service: Cancel Order use case.

Releases the order's reservations first, then marks the order
CANCELLED, so an order is never reported cancelled while its units are
still held. Cancelling an already-cancelled order only repeats the
(idempotent) reservation release.
"""

from __future__ import annotations

import logging

from rms.domain.exceptions import EntityNotFoundError
from rms.domain.repository.order_repository import OrderRepository
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.reservation_repository import ReservationRepository
from rms.domain.service.availability_calculator import AvailabilityCalculator
from rms.domain.service.reservation_manager import ReservationManager

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def handle(self, order_id: int) -> int:
        """Cancel an order; returns how many reservations were released."""
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        manager = ReservationManager(
            self._reservation_repo,
            AvailabilityCalculator(self._product_repo, self._reservation_repo),
        )
        released = manager.cancel_order_reservations(order_id)

        if order.is_cancelled:
            logger.info("Order #%s was already cancelled", order_id)
            return released

        order.cancel()
        self._order_repo.save(order)
        return released
