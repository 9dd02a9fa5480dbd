"""Domain service: Availability Calculator.

Answers "can N more units of this product be rented for this period?"
by aggregating the ACTIVE reservations that overlap the period against
the product's total stock. Read-only; never mutates reservations.

Variants share the product's pool, so aggregation is always scoped to
the product. A variant id is only checked for existence.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date

from rms.domain.exceptions import EntityNotFoundError, ValidationError
from rms.domain.model.availability import AvailabilityResult, DayAvailability
from rms.domain.model.product import Product
from rms.domain.model.reservation import Reservation
from rms.domain.model.value_objects import Quantity, RentalPeriod
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)


class AvailabilityCalculator:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def check(
        self,
        product_id: str,
        period: RentalPeriod,
        quantity: int,
        variant_id: str | None = None,
        exclude_order_id: int | None = None,
    ) -> AvailabilityResult:
        """Check whether ``quantity`` more units fit into ``period``.

        Raises InvalidIntervalError for a non-positive quantity and
        EntityNotFoundError for an unknown product or variant. Not having
        enough units is reported through the result, not raised.

        ``exclude_order_id`` ignores one order's own reservations, which
        is how an existing order is re-validated.
        """
        requested = Quantity(quantity)
        product = self._load_product(product_id, variant_id)

        overlapping = self._reservation_repo.find_active_overlapping(
            product.id, period, exclude_order_id=exclude_order_id
        )
        reserved = peak_reserved(overlapping, period)
        remaining = product.quantity - reserved
        available = remaining >= requested.value

        logger.debug(
            "Availability %s %s: total=%d reserved=%d requested=%d",
            product.id, period, product.quantity, reserved, requested.value,
        )

        return AvailabilityResult(
            available=available,
            available_quantity=max(0, remaining),
            total_quantity=product.quantity,
            reserved_quantity=reserved,
            message=None if available else (
                f"Only {max(0, remaining)} available for the selected dates"
            ),
        )

    def daily_availability(self, product_id: str, period: RentalPeriod) -> list[DayAvailability]:
        """Remaining units for each day of ``period`` (calendar view)."""
        product = self._load_product(product_id)
        reservations = self._reservation_repo.find_active_overlapping(product.id, period)

        days: list[DayAvailability] = []
        for day in period.each_day():
            reserved = sum(r.quantity for r in reservations if r.period.contains(day))
            days.append(DayAvailability(day=day, available_quantity=max(0, product.quantity - reserved)))
        return days

    def month_calendar(self, product_id: str, year: int, month: int) -> list[DayAvailability]:
        """Daily availability for every day of a calendar month (1-12)."""
        try:
            start = date(year, month, 1)
            end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        except ValueError as exc:
            raise ValidationError(f"No calendar for {year}-{month:02d}: {exc}") from exc
        return self.daily_availability(product_id, RentalPeriod(start, end))

    def reservations_for(self, product_id: str, period: RentalPeriod) -> list[Reservation]:
        """ACTIVE reservations of a product overlapping ``period``."""
        product = self._load_product(product_id)
        return self._reservation_repo.find_active_overlapping(product.id, period)

    # --- Internal helpers -----------------------------------------------------

    def _load_product(self, product_id: str, variant_id: str | None = None) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        if variant_id is not None:
            product.variant(variant_id)
        return product


def peak_reserved(reservations: list[Reservation], period: RentalPeriod) -> int:
    """Largest number of units committed on any single day of ``period``.

    Sweeps over reservation boundaries clipped to ``period``. Because
    periods are half-open, a reservation ending on day D and one starting
    on day D never count together.
    """
    deltas: dict[date, int] = defaultdict(int)
    for r in reservations:
        if not r.period.overlaps(period):
            continue
        deltas[max(r.period.start, period.start)] += r.quantity
        deltas[min(r.period.end, period.end)] -= r.quantity

    peak = running = 0
    for day in sorted(deltas):
        running += deltas[day]
        peak = max(peak, running)
    return peak
