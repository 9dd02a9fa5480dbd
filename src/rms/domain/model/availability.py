"""Read-side results produced by the availability calculator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of an availability check.

    ``available_quantity`` is the remaining capacity for the whole
    requested period (never negative), so callers can suggest a smaller
    quantity when ``available`` is False.
    """

    available: bool
    available_quantity: int
    total_quantity: int
    reserved_quantity: int
    message: str | None = None


@dataclass(frozen=True)
class DayAvailability:
    day: date
    available_quantity: int
