"""Rental order aggregate.

An order owns its line items and, indirectly, the reservations made for
them (reservations reference the order id). Line items come in two kinds
that feed the reservation engine identically: items checked out from a
cart and items accepted from a vendor quotation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rms.domain.exceptions import ValidationError
from rms.domain.model.value_objects import Quantity, RentalPeriod


class OrderStatus(Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class LineItemSource(Enum):
    DIRECT = "DIRECT"
    QUOTATION = "QUOTATION"


@dataclass(frozen=True)
class RentalLineItem:
    """Shared interval/quantity contract of every line item kind."""

    product_id: str
    product_name: str
    quantity: Quantity
    period: RentalPeriod
    variant_id: str | None = None

    source = LineItemSource.DIRECT


@dataclass(frozen=True)
class DirectLineItem(RentalLineItem):
    """An item checked out from the customer's cart."""

    source = LineItemSource.DIRECT


@dataclass(frozen=True)
class QuotationLineItem(RentalLineItem):
    """An item accepted from a vendor quotation."""

    quotation_id: str = ""

    source = LineItemSource.QUOTATION


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


@dataclass
class RentalOrder:
    """Aggregate root for rental orders.

    Use the ``RentalOrder.create()`` factory for new orders — it enforces
    all business rules. The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_name: str
    items: list[RentalLineItem]
    status: OrderStatus = OrderStatus.DRAFT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(customer_name: str, items: list[RentalLineItem]) -> RentalOrder:
        """Create a new order, enforcing all invariants."""
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        return RentalOrder(id=None, customer_name=customer_name.strip(), items=list(items))

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        """Transition DRAFT -> CONFIRMED.

        Reservations for every line item must be committed *before*
        calling this (coordinated by the checkout handlers).
        """
        if self.status != OrderStatus.DRAFT:
            raise ValidationError(
                f"Cannot confirm order — current status is {self.status.value}, "
                f"expected DRAFT"
            )
        self.status = OrderStatus.CONFIRMED

    def cancel(self) -> None:
        """Transition DRAFT|CONFIRMED -> CANCELLED.

        Reservations must be cancelled *before* calling this so the order
        is never reported cancelled while its units are still held.
        """
        if self.status == OrderStatus.CANCELLED:
            raise ValidationError("Order is already cancelled")
        self.status = OrderStatus.CANCELLED

    # --- Computed properties --------------------------------------------------

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def quotation_id(self) -> str | None:
        for item in self.items:
            if isinstance(item, QuotationLineItem):
                return item.quotation_id
        return None

    @property
    def total_units(self) -> int:
        return sum(item.quantity.value for item in self.items)
