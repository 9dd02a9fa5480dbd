"""Abstract repository for the rental catalog.

A product's ``quantity`` is the size of the pool every rental period
draws from; the catalog knows nothing about reservations. Only
``AddProductHandler`` and ``SetStockHandler`` write to it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rms.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Case-insensitive name lookup, used to keep product names unique."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Every rentable product, variants included."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
