"""Shared fixtures: a small rental catalog wired to in-memory repositories."""

from __future__ import annotations

import pytest

from rms.domain.model.product import Product, ProductVariant
from rms.domain.service.availability_calculator import AvailabilityCalculator
from rms.domain.service.reservation_manager import ReservationManager
from tests.fakes import FakeProductRepository, FakeReservationRepository


@pytest.fixture
def products() -> FakeProductRepository:
    return FakeProductRepository(
        [
            Product(id="1", name="Camera", quantity=1),
            Product(id="2", name="Tent", quantity=3),
            Product(
                id="3",
                name="Bike",
                quantity=2,
                variants=[ProductVariant("3-1", "Small"), ProductVariant("3-2", "Large")],
            ),
        ]
    )


@pytest.fixture
def reservations() -> FakeReservationRepository:
    return FakeReservationRepository()


@pytest.fixture
def calculator(products, reservations) -> AvailabilityCalculator:
    return AvailabilityCalculator(products, reservations)


@pytest.fixture
def manager(reservations, calculator) -> ReservationManager:
    return ReservationManager(reservations, calculator)
