"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Insufficient availability is deliberately *not* an exception: it is a
normal outcome reported through ``AvailabilityResult``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rms.domain.model.availability import AvailabilityResult


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidIntervalError(ValidationError):
    """A rental period or requested quantity is degenerate."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ReservationConflictError(DomainException):
    """Stock was taken by a concurrent writer before the reservation committed.

    ``availability`` holds the result of the re-check made at commit time
    (None when the conflict came from the storage layer) so callers can
    offer a smaller quantity.
    """

    def __init__(self, message: str, availability: AvailabilityResult | None = None) -> None:
        super().__init__(message)
        self.availability = availability


class StorageError(DomainException):
    """The persistence layer failed; nothing was committed."""


class StorageConflictError(StorageError):
    """The database aborted a transaction because a concurrent one won."""
