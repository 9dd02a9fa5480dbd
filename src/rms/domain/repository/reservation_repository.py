"""Abstract repository for Reservation entities (the interval store).

Implementations must make ``find_active_overlapping`` cheap; it runs on
every availability check. Mutations and the reads they depend on are
grouped with ``transaction()`` so a check-then-insert is never split by a
concurrent writer for the same product.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from rms.domain.model.reservation import Reservation
from rms.domain.model.value_objects import RentalPeriod


class ReservationRepository(ABC):

    @abstractmethod
    def transaction(self, product_id: str | None = None) -> AbstractContextManager[None]:
        """Run the enclosed calls as one atomic unit.

        When ``product_id`` is given the unit is also serialized against
        every other transaction for that product. Nothing is committed if
        the block raises.
        """

    @abstractmethod
    def find_active_overlapping(
        self,
        product_id: str,
        period: RentalPeriod,
        exclude_order_id: int | None = None,
    ) -> list[Reservation]:
        """Return ACTIVE reservations of the product overlapping ``period``,
        ordered by start date."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[Reservation]:
        """Return every reservation (any status) owned by an order."""

    @abstractmethod
    def add(self, reservation: Reservation) -> Reservation:
        """Insert a new reservation and assign its ID."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a status change of an existing reservation."""
