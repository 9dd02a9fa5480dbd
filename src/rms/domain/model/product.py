"""Product aggregate.

Products live independently of orders and reservations. ``quantity`` is
the number of physical units that exist; it is never decremented by
rentals. Date-scoped usage is tracked by reservations instead.

Variants (sizes, colours, ...) share the parent product's pool of units.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rms.domain.exceptions import EntityNotFoundError, ValidationError


@dataclass(frozen=True)
class ProductVariant:
    id: str
    name: str


@dataclass
class Product:
    """A rentable product in the catalog.

    This is an aggregate root. Kept as a mutable dataclass because
    restocking (changing ``quantity``) is a legitimate mutation.
    """

    id: str
    name: str
    quantity: int
    variants: list[ProductVariant] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValidationError("Product stock cannot be negative")

    def set_stock(self, quantity: int) -> None:
        """Change the number of units in existence.

        Lowering stock below what is already reserved for some day is
        allowed here; the shortfall only shows up as zero availability.
        """
        if quantity < 0:
            raise ValidationError("Product stock cannot be negative")
        self.quantity = quantity

    def add_variant(self, variant: ProductVariant) -> None:
        if any(v.id == variant.id for v in self.variants):
            raise ValidationError(f"Variant '{variant.id}' already exists on {self.name}")
        self.variants.append(variant)

    def variant(self, variant_id: str) -> ProductVariant:
        for v in self.variants:
            if v.id == variant_id:
                return v
        raise EntityNotFoundError(
            f"Variant '{variant_id}' not found for product '{self.name}'"
        )
