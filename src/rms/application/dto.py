"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class RentalItemSpec:
    """Input: what the customer asked for (product, dates, quantity)."""

    product_id: str
    quantity: int
    start: date
    end: date
    variant_id: str | None = None


@dataclass(frozen=True)
class AvailabilityDTO:
    """Output: answer to "can I rent this?"."""

    product_id: str
    available: bool
    available_quantity: int
    total_quantity: int
    reserved_quantity: int
    message: str | None = None


@dataclass(frozen=True)
class DayAvailabilityDTO:
    day: str  # ISO date
    available_quantity: int


@dataclass(frozen=True)
class RentalLineDTO:
    """Output: a single cart or order line as displayed to the user."""

    product_name: str
    variant_id: str | None
    quantity: int
    start: str
    end: str
    days: int
    source: str = "DIRECT"


@dataclass(frozen=True)
class CartDTO:
    customer_name: str
    items: list[RentalLineDTO]
    item_count: int


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_name: str
    status: str
    items: list[RentalLineDTO]
    created_at: str
    quotation_id: str | None = None
    total_units: int = 0


@dataclass(frozen=True)
class ReservationDTO:
    id: int
    product_id: str
    variant_id: str | None
    order_id: int
    quantity: int
    start: str
    end: str
    status: str
