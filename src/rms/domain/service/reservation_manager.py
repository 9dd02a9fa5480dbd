"""Domain service: Reservation Manager.

The only component allowed to change reservation state. Creation runs
the availability check and the insert inside one repository transaction
serialized on the product, so two checkouts racing for the last unit
cannot both commit. Cancellation flips every ACTIVE reservation of an
order to CANCELLED in one transaction and is safe to repeat.
"""

from __future__ import annotations

import logging

from rms.domain.exceptions import ReservationConflictError, StorageConflictError
from rms.domain.model.reservation import Reservation
from rms.domain.model.value_objects import Quantity, RentalPeriod
from rms.domain.repository.reservation_repository import ReservationRepository
from rms.domain.service.availability_calculator import AvailabilityCalculator

logger = logging.getLogger(__name__)

DEFAULT_CONFLICT_RETRIES = 1


class ReservationManager:

    def __init__(
        self,
        reservation_repo: ReservationRepository,
        calculator: AvailabilityCalculator,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._calculator = calculator
        self._conflict_retries = max(0, conflict_retries)

    def create_reservation(
        self,
        product_id: str,
        order_id: int,
        quantity: int,
        period: RentalPeriod,
        variant_id: str | None = None,
    ) -> Reservation:
        """Reserve ``quantity`` units of a product for ``period``.

        Raises:
            InvalidIntervalError: non-positive quantity.
            EntityNotFoundError: unknown product or variant.
            ReservationConflictError: the units are no longer available at
                commit time, or the storage layer kept aborting the
                transaction in favour of a concurrent writer.
            StorageError: the store failed; nothing was written.
        """
        Quantity(quantity)
        attempts = self._conflict_retries + 1
        attempt = 0

        while True:
            attempt += 1
            try:
                return self._check_and_insert(product_id, order_id, quantity, period, variant_id)
            except StorageConflictError as exc:
                logger.warning(
                    "Storage conflict reserving %s for order #%s (attempt %d/%d): %s",
                    product_id, order_id, attempt, attempts, exc,
                )
                if attempt >= attempts:
                    raise ReservationConflictError(
                        f"Reservation of product '{product_id}' for {period} lost "
                        f"to a concurrent checkout"
                    ) from exc

    def cancel_order_reservations(self, order_id: int) -> int:
        """Cancel every ACTIVE reservation owned by an order.

        Returns the number of reservations cancelled. An order with no
        active reservations is a successful no-op, so repeated calls are
        harmless.
        """
        cancelled = 0
        with self._reservation_repo.transaction():
            for reservation in self._reservation_repo.list_for_order(order_id):
                if not reservation.is_active:
                    continue
                reservation.cancel()
                self._reservation_repo.save(reservation)
                cancelled += 1

        if cancelled:
            logger.info("Cancelled %d reservation(s) for order #%s", cancelled, order_id)
        return cancelled

    def reservations_for_order(self, order_id: int) -> list[Reservation]:
        return self._reservation_repo.list_for_order(order_id)

    # --- Internal helpers -----------------------------------------------------

    def _check_and_insert(
        self,
        product_id: str,
        order_id: int,
        quantity: int,
        period: RentalPeriod,
        variant_id: str | None,
    ) -> Reservation:
        with self._reservation_repo.transaction(product_id):
            result = self._calculator.check(
                product_id, period, quantity, variant_id=variant_id
            )
            if not result.available:
                logger.info(
                    "Rejected reservation of %d x %s for %s (order #%s): %d available",
                    quantity, product_id, period, order_id, result.available_quantity,
                )
                raise ReservationConflictError(
                    f"Cannot reserve {quantity} of product '{product_id}' for {period}: "
                    f"{result.message}",
                    availability=result,
                )

            reservation = self._reservation_repo.add(
                Reservation.create(
                    product_id=product_id,
                    order_id=order_id,
                    quantity=quantity,
                    period=period,
                    variant_id=variant_id,
                )
            )

        logger.info(
            "Reserved %d x %s for %s (order #%s, reservation #%s)",
            quantity, product_id, period, order_id, reservation.id,
        )
        return reservation
