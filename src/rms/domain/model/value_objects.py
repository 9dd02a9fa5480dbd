"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from rms.domain.exceptions import InvalidIntervalError, ValidationError


@dataclass(frozen=True, order=True)
class RentalPeriod:
    """A half-open date range ``[start, end)``.

    ``end`` is exclusive: a one-day rental on the 5th is ``[5th, 6th)``.
    Two periods that merely touch (one ends the day the other starts)
    do not overlap, so the unit can be handed over on that day.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise InvalidIntervalError("Rental period bounds must be dates")
        if self.start >= self.end:
            raise InvalidIntervalError(
                f"Rental period start {self.start.isoformat()} must be before "
                f"end {self.end.isoformat()}"
            )

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    def overlaps(self, other: RentalPeriod) -> bool:
        return self.start < other.end and self.end > other.start

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end

    def each_day(self) -> Iterator[date]:
        day = self.start
        while day < self.end:
            yield day
            day += timedelta(days=1)

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot rent zero or negative units.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise InvalidIntervalError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
