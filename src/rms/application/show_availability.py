"""Application service: availability calendar and reservation listing (queries)."""

from __future__ import annotations

from datetime import date

from rms.application.dto import DayAvailabilityDTO, ReservationDTO
from rms.application.mappers import reservation_to_dto
from rms.domain.exceptions import ValidationError
from rms.domain.model.value_objects import RentalPeriod
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.reservation_repository import ReservationRepository
from rms.domain.service.availability_calculator import AvailabilityCalculator


class ShowAvailabilityCalendarHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._calculator = AvailabilityCalculator(product_repo, reservation_repo)

    def handle(self, product_id: str, year: int, month: int) -> list[DayAvailabilityDTO]:
        """Remaining units for every day of a month (``month`` is 1-12)."""
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")

        days = self._calculator.month_calendar(product_id, year, month)

        return [
            DayAvailabilityDTO(day=d.day.isoformat(), available_quantity=d.available_quantity)
            for d in days
        ]


class ListReservationsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._calculator = AvailabilityCalculator(product_repo, reservation_repo)

    def handle(self, product_id: str, start: date, end: date) -> list[ReservationDTO]:
        """ACTIVE reservations of a product overlapping ``[start, end)``."""
        reservations = self._calculator.reservations_for(product_id, RentalPeriod(start, end))
        return [reservation_to_dto(r) for r in reservations]
