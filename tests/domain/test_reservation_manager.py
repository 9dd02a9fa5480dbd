"""Unit tests for the ReservationManager domain service."""

import random
import threading
from datetime import timedelta

import pytest

from rms.domain.exceptions import (
    EntityNotFoundError,
    InvalidIntervalError,
    ReservationConflictError,
    StorageConflictError,
    StorageError,
)
from rms.domain.model.reservation import ReservationStatus
from rms.domain.model.value_objects import RentalPeriod
from rms.domain.service.availability_calculator import AvailabilityCalculator
from rms.domain.service.reservation_manager import ReservationManager
from tests.fakes import FakeReservationRepository
from tests.helpers import d


def _active_units_on(repo, product_id, day):
    return sum(
        r.quantity
        for r in repo.all()
        if r.product_id == product_id and r.is_active and r.period.contains(day)
    )


class TestCreateReservation:

    def test_creates_active_reservation(self, manager, reservations):
        r = manager.create_reservation("2", order_id=1, quantity=2, period=RentalPeriod(d(1), d(5)))

        assert r.id is not None
        assert r.status == ReservationStatus.ACTIVE
        assert [x.id for x in reservations.all()] == [r.id]

    def test_records_variant(self, manager):
        r = manager.create_reservation(
            "3", order_id=1, quantity=1, period=RentalPeriod(d(1), d(5)), variant_id="3-2"
        )
        assert r.variant_id == "3-2"

    def test_insufficient_stock_is_conflict_with_availability(self, manager, reservations):
        manager.create_reservation("2", 1, 2, RentalPeriod(d(1), d(10)))

        with pytest.raises(ReservationConflictError) as excinfo:
            manager.create_reservation("2", 2, 2, RentalPeriod(d(5), d(6)))

        assert excinfo.value.availability.available_quantity == 1
        assert len(reservations.all()) == 1

    def test_disjoint_intervals_do_not_block(self, manager):
        manager.create_reservation("1", 1, 1, RentalPeriod(d(1), d(5)))
        manager.create_reservation("1", 2, 1, RentalPeriod(d(10), d(15)))

    def test_adjacent_intervals_do_not_block(self, manager):
        manager.create_reservation("1", 1, 1, RentalPeriod(d(1), d(5)))
        manager.create_reservation("1", 2, 1, RentalPeriod(d(5), d(10)))

    def test_one_shared_day_blocks(self, manager):
        manager.create_reservation("1", 1, 1, RentalPeriod(d(1), d(6)))

        with pytest.raises(ReservationConflictError):
            manager.create_reservation("1", 2, 1, RentalPeriod(d(5), d(10)))

    def test_invalid_quantity_rejected_before_any_lookup(self, manager):
        with pytest.raises(InvalidIntervalError):
            manager.create_reservation("999", 1, 0, RentalPeriod(d(1), d(2)))

    def test_unknown_product(self, manager):
        with pytest.raises(EntityNotFoundError):
            manager.create_reservation("999", 1, 1, RentalPeriod(d(1), d(2)))

    def test_storage_failure_leaves_no_row(self, manager, reservations):
        reservations.fail_next_add = True

        with pytest.raises(StorageError):
            manager.create_reservation("2", 1, 1, RentalPeriod(d(1), d(2)))

        assert reservations.all() == []


class FlakyReservationRepository(FakeReservationRepository):
    """Aborts the first ``failures`` inserts like a serializable database would."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.attempts = 0

    def add(self, reservation):
        self.attempts += 1
        if self.failures:
            self.failures -= 1
            raise StorageConflictError("could not serialize access")
        return super().add(reservation)


class TestStorageConflictRetry:

    def test_retries_once_then_succeeds(self, products):
        repo = FlakyReservationRepository(failures=1)
        manager = ReservationManager(repo, AvailabilityCalculator(products, repo))

        r = manager.create_reservation("2", 1, 1, RentalPeriod(d(1), d(2)))

        assert r.id is not None
        assert repo.attempts == 2

    def test_gives_up_after_retries(self, products):
        repo = FlakyReservationRepository(failures=5)
        manager = ReservationManager(repo, AvailabilityCalculator(products, repo), conflict_retries=1)

        with pytest.raises(ReservationConflictError, match="concurrent checkout"):
            manager.create_reservation("2", 1, 1, RentalPeriod(d(1), d(2)))

        assert repo.attempts == 2
        assert repo.all() == []


class TestCancelOrderReservations:

    def test_cancels_all_active_for_order(self, manager, reservations):
        manager.create_reservation("2", 1, 1, RentalPeriod(d(1), d(5)))
        manager.create_reservation("1", 1, 1, RentalPeriod(d(1), d(5)))
        manager.create_reservation("2", 2, 1, RentalPeriod(d(1), d(5)))

        assert manager.cancel_order_reservations(1) == 2

        statuses = {(r.order_id, r.product_id): r.status for r in reservations.all()}
        assert statuses[(1, "2")] == ReservationStatus.CANCELLED
        assert statuses[(1, "1")] == ReservationStatus.CANCELLED
        assert statuses[(2, "2")] == ReservationStatus.ACTIVE

    def test_idempotent(self, manager, reservations):
        manager.create_reservation("2", 1, 2, RentalPeriod(d(1), d(5)))

        assert manager.cancel_order_reservations(1) == 1
        after_first = [(r.id, r.status) for r in reservations.all()]
        assert manager.cancel_order_reservations(1) == 0
        assert [(r.id, r.status) for r in reservations.all()] == after_first

    def test_unknown_order_is_noop(self, manager):
        assert manager.cancel_order_reservations(12345) == 0

    def test_cancelled_rows_retained(self, manager):
        manager.create_reservation("2", 1, 1, RentalPeriod(d(1), d(5)))
        manager.cancel_order_reservations(1)

        history = manager.reservations_for_order(1)
        assert len(history) == 1
        assert history[0].status == ReservationStatus.CANCELLED

    def test_cancellation_frees_capacity(self, manager, calculator):
        manager.create_reservation("2", 1, 2, RentalPeriod(d(1), d(10)))
        manager.create_reservation("2", 2, 1, RentalPeriod(d(5), d(15)))

        with pytest.raises(ReservationConflictError):
            manager.create_reservation("2", 3, 2, RentalPeriod(d(6), d(8)))

        manager.cancel_order_reservations(1)

        assert calculator.check("2", RentalPeriod(d(6), d(8)), 2).available
        manager.create_reservation("2", 3, 2, RentalPeriod(d(6), d(8)))


class TestConcurrency:

    def test_race_for_last_unit(self, manager, reservations):
        barrier = threading.Barrier(2)
        outcomes: list[str] = []

        def attempt(order_id: int) -> None:
            barrier.wait()
            try:
                manager.create_reservation("1", order_id, 1, RentalPeriod(d(1), d(5)))
                outcomes.append("ok")
            except ReservationConflictError:
                outcomes.append("conflict")

        threads = [threading.Thread(target=attempt, args=(i,)) for i in (1, 2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes) == ["conflict", "ok"]
        assert _active_units_on(reservations, "1", d(2)) == 1

    def test_many_threads_never_oversell(self, manager, reservations):
        def attempt(order_id: int) -> None:
            start = d(1) + timedelta(days=order_id % 4)
            try:
                manager.create_reservation("2", order_id, 1, RentalPeriod(start, start + timedelta(days=3)))
            except ReservationConflictError:
                pass

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(1, 21)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for day in RentalPeriod(d(1), d(10)).each_day():
            assert _active_units_on(reservations, "2", day) <= 3


class TestInvariant:

    def test_random_create_cancel_sequence_never_oversells(self, manager, reservations):
        rng = random.Random(20250601)
        for order_id in range(1, 200):
            if rng.random() < 0.25:
                manager.cancel_order_reservations(rng.randint(1, order_id))
                continue
            start = d(1) + timedelta(days=rng.randint(0, 20))
            period = RentalPeriod(start, start + timedelta(days=rng.randint(1, 7)))
            try:
                manager.create_reservation("2", order_id, rng.randint(1, 3), period)
            except ReservationConflictError:
                pass

            for day in RentalPeriod(d(1), d(30)).each_day():
                assert _active_units_on(reservations, "2", day) <= 3
