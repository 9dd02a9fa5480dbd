"""Integration tests for the Checkout and quotation order use cases
(the checkout gates)."""

import pytest

from rms.application.add_to_cart import AddToCartHandler
from rms.application.cancel_order import CancelOrderHandler
from rms.application.checkout import CheckoutHandler
from rms.application.dto import RentalItemSpec
from rms.application.place_quotation_order import PlaceQuotationOrderHandler
from rms.domain.exceptions import (
    EntityNotFoundError,
    ReservationConflictError,
    StorageError,
    ValidationError,
)
from rms.domain.model.order import OrderStatus
from rms.domain.model.reservation import ReservationStatus
from rms.domain.model.value_objects import RentalPeriod
from tests.fakes import FakeCartRepository, FakeOrderRepository, FakeReservationRepository
from tests.helpers import d


@pytest.fixture
def carts() -> FakeCartRepository:
    return FakeCartRepository()


@pytest.fixture
def orders() -> FakeOrderRepository:
    return FakeOrderRepository()


@pytest.fixture
def add_to_cart(carts, products, reservations) -> AddToCartHandler:
    return AddToCartHandler(carts, products, reservations)


@pytest.fixture
def checkout(carts, orders, products, reservations) -> CheckoutHandler:
    return CheckoutHandler(carts, orders, products, reservations)


class TestCheckoutHappyPath:

    def test_confirms_order_and_reserves_each_line(self, add_to_cart, checkout, orders, reservations, carts):
        add_to_cart.handle("Alice", RentalItemSpec("2", 2, d(1), d(4)))
        add_to_cart.handle("Alice", RentalItemSpec("3", 1, d(2), d(3), variant_id="3-1"))

        dto = checkout.handle("Alice")

        assert dto.status == OrderStatus.CONFIRMED.value
        assert [i.source for i in dto.items] == ["DIRECT", "DIRECT"]
        assert orders.get_by_id(dto.id).status == OrderStatus.CONFIRMED

        held = reservations.list_for_order(dto.id)
        assert sorted((r.product_id, r.quantity, r.variant_id) for r in held) == [
            ("2", 2, None),
            ("3", 1, "3-1"),
        ]
        assert carts.get_for_customer("Alice").is_empty

    def test_empty_cart_rejected(self, checkout):
        with pytest.raises(ValidationError, match="Cart is empty"):
            checkout.handle("Alice")


class TestCheckoutRejections:

    def test_item_taken_since_added_to_cart(self, add_to_cart, checkout, manager, orders, carts):
        add_to_cart.handle("Alice", RentalItemSpec("1", 1, d(1), d(5)))
        manager.create_reservation("1", 99, 1, RentalPeriod(d(3), d(4)))

        with pytest.raises(ValidationError, match='"Camera" is not available'):
            checkout.handle("Alice")

        assert orders.get_by_id(1) is None
        assert len(carts.get_for_customer("Alice").items) == 1

    def test_lines_competing_for_same_units_roll_back(self, add_to_cart, checkout, orders, reservations):
        # Each line fits alone; together they need 4 tents on day 3.
        add_to_cart.handle("Alice", RentalItemSpec("2", 2, d(1), d(4)))
        add_to_cart.handle("Alice", RentalItemSpec("2", 2, d(3), d(6)))

        with pytest.raises(ReservationConflictError):
            checkout.handle("Alice")

        order = orders.get_by_id(1)
        assert order.status == OrderStatus.CANCELLED
        assert all(r.status == ReservationStatus.CANCELLED for r in reservations.all())

    def test_storage_failure_rolls_back(self, add_to_cart, checkout, orders, reservations):
        add_to_cart.handle("Alice", RentalItemSpec("2", 1, d(1), d(4)))
        reservations.fail_next_add = True

        with pytest.raises(StorageError):
            checkout.handle("Alice")

        assert orders.get_by_id(1).status == OrderStatus.CANCELLED
        assert reservations.all() == []


class TestPlaceQuotationOrder:

    def test_quotation_items_reserved(self, orders, products, reservations):
        handler = PlaceQuotationOrderHandler(orders, products, reservations)

        dto = handler.handle(
            "Bob",
            "Q-100",
            [RentalItemSpec("2", 3, d(10), d(12)), RentalItemSpec("1", 1, d(10), d(11))],
        )

        assert dto.status == OrderStatus.CONFIRMED.value
        assert dto.quotation_id == "Q-100"
        assert {i.source for i in dto.items} == {"QUOTATION"}
        assert len(reservations.list_for_order(dto.id)) == 2

    def test_quotation_unavailable(self, orders, products, reservations, manager):
        manager.create_reservation("1", 99, 1, RentalPeriod(d(10), d(11)))
        handler = PlaceQuotationOrderHandler(orders, products, reservations)

        with pytest.raises(ValidationError, match="not available"):
            handler.handle("Bob", "Q-101", [RentalItemSpec("1", 1, d(10), d(11))])

    def test_quotation_unknown_product(self, orders, products, reservations):
        handler = PlaceQuotationOrderHandler(orders, products, reservations)

        with pytest.raises(EntityNotFoundError):
            handler.handle("Bob", "Q-102", [RentalItemSpec("404", 1, d(10), d(11))])

    def test_quotation_id_required(self, orders, products, reservations):
        handler = PlaceQuotationOrderHandler(orders, products, reservations)

        with pytest.raises(ValidationError, match="Quotation ID"):
            handler.handle("Bob", " ", [RentalItemSpec("2", 1, d(10), d(11))])


class OutageReservationRepository(FakeReservationRepository):
    """Accepts the first insert, then goes down until ``recover()``."""

    def __init__(self) -> None:
        super().__init__()
        self.down = False
        self._adds = 0

    def add(self, reservation):
        self._adds += 1
        if self._adds == 2:
            self.down = True
        if self.down:
            raise StorageError("down")
        return super().add(reservation)

    def list_for_order(self, order_id):
        if self.down:
            raise StorageError("still down")
        return super().list_for_order(order_id)

    def recover(self) -> None:
        self.down = False


class TestCheckoutDuringOutage:

    def test_original_failure_surfaces_and_order_is_cancelled(self, carts, orders, products):
        store = OutageReservationRepository()
        AddToCartHandler(carts, products, store).handle("Ann", RentalItemSpec("2", 1, d(1), d(4)))
        AddToCartHandler(carts, products, store).handle("Ann", RentalItemSpec("1", 1, d(1), d(4)))

        with pytest.raises(StorageError, match="^down$"):
            CheckoutHandler(carts, orders, products, store).handle("Ann")

        assert orders.get_by_id(1).status == OrderStatus.CANCELLED
        assert len(carts.get_for_customer("Ann").items) == 2

    def test_cancelling_again_releases_leftovers(self, carts, orders, products):
        store = OutageReservationRepository()
        AddToCartHandler(carts, products, store).handle("Ann", RentalItemSpec("2", 1, d(1), d(4)))
        AddToCartHandler(carts, products, store).handle("Ann", RentalItemSpec("1", 1, d(1), d(4)))
        with pytest.raises(StorageError):
            CheckoutHandler(carts, orders, products, store).handle("Ann")

        store.recover()
        released = CancelOrderHandler(orders, products, store).handle(1)

        assert released == 1
        assert all(r.status == ReservationStatus.CANCELLED for r in store.all())
