"""Cart aggregate: what a customer intends to rent, before checkout.

A cart holds no stock. Availability is checked when items are added and
again, atomically, when checkout commits reservations.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rms.domain.exceptions import ValidationError
from rms.domain.model.order import LineItemSource
from rms.domain.model.value_objects import Quantity, RentalPeriod


@dataclass
class CartItem:
    product_id: str
    product_name: str
    quantity: Quantity
    period: RentalPeriod
    variant_id: str | None = None

    source = LineItemSource.DIRECT

    def matches(self, product_id: str, variant_id: str | None, period: RentalPeriod) -> bool:
        return (
            self.product_id == product_id
            and self.variant_id == variant_id
            and self.period == period
        )


@dataclass
class Cart:

    customer_name: str
    items: list[CartItem] = field(default_factory=list)

    def find(self, product_id: str, variant_id: str | None, period: RentalPeriod) -> CartItem | None:
        for item in self.items:
            if item.matches(product_id, variant_id, period):
                return item
        return None

    def add(self, item: CartItem) -> CartItem:
        """Add an item, merging with an existing line for the same
        product, variant and period."""
        existing = self.find(item.product_id, item.variant_id, item.period)
        if existing is None:
            self.items.append(item)
            return item
        existing.quantity = Quantity(existing.quantity.value + item.quantity.value)
        return existing

    def update_quantity(
        self,
        product_id: str,
        variant_id: str | None,
        period: RentalPeriod,
        quantity: Quantity,
    ) -> CartItem:
        item = self.find(product_id, variant_id, period)
        if item is None:
            raise ValidationError("Item is not in the cart")
        item.quantity = quantity
        return item

    def remove(self, product_id: str, variant_id: str | None, period: RentalPeriod) -> None:
        item = self.find(product_id, variant_id, period)
        if item is None:
            raise ValidationError("Item is not in the cart")
        self.items.remove(item)

    def clear(self) -> None:
        self.items.clear()

    @property
    def is_empty(self) -> bool:
        return not self.items
