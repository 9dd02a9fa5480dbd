"""Reservation entity: a committed claim on units of a product for a period.

A reservation is never edited in place. The only mutation is the
``ACTIVE -> CANCELLED`` transition; changing quantity or dates means
cancelling and creating a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rms.domain.exceptions import InvalidIntervalError, ValidationError
from rms.domain.model.value_objects import RentalPeriod


class ReservationStatus(Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"


@dataclass
class Reservation:
    """Aggregate root for one reserved block of units.

    Use ``Reservation.create()`` for new reservations. The ``__init__``
    stays simple so repositories can reconstitute persisted rows,
    including cancelled ones, without re-validating.
    """

    id: int | None
    product_id: str
    variant_id: str | None
    order_id: int
    quantity: int
    period: RentalPeriod
    status: ReservationStatus = ReservationStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cancelled_at: datetime | None = None

    @staticmethod
    def create(
        product_id: str,
        order_id: int,
        quantity: int,
        period: RentalPeriod,
        variant_id: str | None = None,
    ) -> Reservation:
        if quantity <= 0:
            raise InvalidIntervalError("Reservation quantity must be positive")
        return Reservation(
            id=None,
            product_id=product_id,
            variant_id=variant_id,
            order_id=order_id,
            quantity=quantity,
            period=period,
        )

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def cancel(self) -> None:
        """Transition ACTIVE -> CANCELLED (terminal)."""
        if self.status == ReservationStatus.CANCELLED:
            raise ValidationError(f"Reservation #{self.id} is already cancelled")
        self.status = ReservationStatus.CANCELLED
        self.cancelled_at = datetime.now(timezone.utc)
