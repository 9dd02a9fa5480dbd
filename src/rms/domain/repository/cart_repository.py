"""Abstract repository for Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rms.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_for_customer(self, customer_name: str) -> Cart | None:
        """Return the customer's cart, or None if they have none yet."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart."""
