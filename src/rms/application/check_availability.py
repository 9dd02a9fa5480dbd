"""Application service: Check Availability use case (query)."""

from __future__ import annotations

from rms.application.dto import AvailabilityDTO, RentalItemSpec
from rms.domain.model.value_objects import RentalPeriod
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.reservation_repository import ReservationRepository
from rms.domain.service.availability_calculator import AvailabilityCalculator


class CheckAvailabilityHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def handle(self, spec: RentalItemSpec) -> AvailabilityDTO:
        calculator = AvailabilityCalculator(self._product_repo, self._reservation_repo)
        period = RentalPeriod(spec.start, spec.end)

        result = calculator.check(
            spec.product_id, period, spec.quantity, variant_id=spec.variant_id
        )

        return AvailabilityDTO(
            product_id=spec.product_id,
            available=result.available,
            available_quantity=result.available_quantity,
            total_quantity=result.total_quantity,
            reserved_quantity=result.reserved_quantity,
            message=result.message,
        )
