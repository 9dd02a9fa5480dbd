"""Tests for the JSON-file repositories (products, orders, carts)."""

from __future__ import annotations

import json

from rms.domain.model.cart import Cart, CartItem
from rms.domain.model.order import (
    DirectLineItem,
    OrderStatus,
    QuotationLineItem,
    RentalOrder,
)
from rms.domain.model.product import Product, ProductVariant
from rms.domain.model.value_objects import Quantity, RentalPeriod
from rms.infrastructure.persistence.json_cart_repository import JsonCartRepository
from rms.infrastructure.persistence.json_order_repository import JsonOrderRepository
from rms.infrastructure.persistence.json_product_repository import JsonProductRepository
from tests.helpers import d


class TestJsonProductRepository:

    def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "nested" / "products.json"
        repo = JsonProductRepository(path)

        assert path.exists()
        assert repo.list_all() == []

    def test_save_and_lookup(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(Product("1", "Bike", 2, [ProductVariant("1-1", "Small")]))

        loaded = repo.get_by_id("1")
        assert loaded.quantity == 2
        assert loaded.variants == [ProductVariant("1-1", "Small")]
        assert repo.get_by_name("bike").id == "1"
        assert repo.get_by_id("2") is None


class TestJsonOrderRepository:

    def test_assigns_sequential_ids(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        period = RentalPeriod(d(1), d(3))

        first = RentalOrder.create("Alice", [DirectLineItem("1", "Bike", Quantity(1), period)])
        second = RentalOrder.create("Bob", [DirectLineItem("1", "Bike", Quantity(1), period)])
        repo.save(first)
        repo.save(second)

        assert (first.id, second.id) == (1, 2)
        assert repo.next_id() == 3

    def test_line_item_kinds_survive_reload(self, tmp_path):
        path = tmp_path / "orders.json"
        repo = JsonOrderRepository(path)
        order = RentalOrder.create(
            "Alice",
            [
                DirectLineItem("1", "Bike", Quantity(1), RentalPeriod(d(1), d(3)), variant_id="1-1"),
                QuotationLineItem("2", "Tent", Quantity(2), RentalPeriod(d(2), d(4)), quotation_id="Q-9"),
            ],
        )
        order.confirm()
        repo.save(order)

        loaded = JsonOrderRepository(path).get_by_id(order.id)

        assert loaded.status == OrderStatus.CONFIRMED
        assert isinstance(loaded.items[0], DirectLineItem)
        assert loaded.items[0].variant_id == "1-1"
        assert isinstance(loaded.items[1], QuotationLineItem)
        assert loaded.items[1].quotation_id == "Q-9"
        assert loaded.created_at == order.created_at
        assert json.loads(path.read_text())[0]["items"][1]["source"] == "QUOTATION"

    def test_save_replaces_existing(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = RentalOrder.create(
            "Alice", [DirectLineItem("1", "Bike", Quantity(1), RentalPeriod(d(1), d(3)))]
        )
        repo.save(order)
        order.cancel()
        repo.save(order)

        assert repo.get_by_id(order.id).status == OrderStatus.CANCELLED
        assert repo.next_id() == 2


class TestJsonCartRepository:

    def test_carts_are_per_customer(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        cart = Cart("Alice")
        cart.add(CartItem("1", "Bike", Quantity(2), RentalPeriod(d(1), d(3)), variant_id="1-1"))
        repo.save(cart)
        repo.save(Cart("Bob"))

        loaded = repo.get_for_customer("Alice")
        assert loaded.items[0].quantity == Quantity(2)
        assert loaded.items[0].variant_id == "1-1"
        assert repo.get_for_customer("Bob").is_empty
        assert repo.get_for_customer("Carol") is None
