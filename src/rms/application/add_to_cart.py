"""Application service: cart use cases (add, update, remove, clear, show).

The cart gate. An item only enters the cart if the requested units are
available for its dates right now; when the item merges with an existing
line the *combined* quantity is checked. Nothing is reserved here;
units are committed at checkout. Changing the quantity of a line re-checks
availability for the new quantity.
"""

from __future__ import annotations

import logging
from datetime import date

from rms.application.dto import CartDTO, RentalItemSpec
from rms.application.mappers import line_to_dto
from rms.domain.exceptions import EntityNotFoundError, ValidationError
from rms.domain.model.cart import Cart, CartItem
from rms.domain.model.value_objects import Quantity, RentalPeriod
from rms.domain.repository.cart_repository import CartRepository
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.reservation_repository import ReservationRepository
from rms.domain.service.availability_calculator import AvailabilityCalculator

logger = logging.getLogger(__name__)


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def handle(self, customer_name: str, spec: RentalItemSpec) -> CartDTO:
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")

        product = self._product_repo.get_by_id(spec.product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{spec.product_id}' not found")

        period = RentalPeriod(spec.start, spec.end)
        quantity = Quantity(spec.quantity)

        cart = self._cart_repo.get_for_customer(customer_name) or Cart(customer_name=customer_name)
        existing = cart.find(product.id, spec.variant_id, period)
        wanted = quantity.value + (existing.quantity.value if existing else 0)

        calculator = AvailabilityCalculator(self._product_repo, self._reservation_repo)
        result = calculator.check(product.id, period, wanted, variant_id=spec.variant_id)
        if not result.available:
            if existing is not None:
                raise ValidationError(
                    f"Cannot add more. Only {result.available_quantity} units "
                    f"available for the selected dates"
                )
            raise ValidationError(
                result.message
                or f"Only {result.available_quantity} units available for the selected dates"
            )

        cart.add(
            CartItem(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                period=period,
                variant_id=spec.variant_id,
            )
        )
        self._cart_repo.save(cart)
        logger.info("Added %d x %s (%s) to cart of %s", quantity.value, product.id, period, customer_name)

        return cart_to_dto(cart)


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, customer_name: str) -> CartDTO:
        cart = self._cart_repo.get_for_customer(customer_name) or Cart(customer_name=customer_name)
        return cart_to_dto(cart)


class UpdateCartItemHandler:
    """Change the quantity of a cart line, re-checking availability for
    the new quantity."""

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def handle(self, customer_name: str, spec: RentalItemSpec) -> CartDTO:
        cart = _load_cart(self._cart_repo, customer_name)
        period = RentalPeriod(spec.start, spec.end)
        quantity = Quantity(spec.quantity)

        if cart.find(spec.product_id, spec.variant_id, period) is None:
            raise ValidationError("Item is not in the cart")

        calculator = AvailabilityCalculator(self._product_repo, self._reservation_repo)
        result = calculator.check(
            spec.product_id, period, quantity.value, variant_id=spec.variant_id
        )
        if not result.available:
            raise ValidationError(
                f"Cannot update. Only {result.available_quantity} units "
                f"available for the selected dates"
            )

        cart.update_quantity(spec.product_id, spec.variant_id, period, quantity)
        self._cart_repo.save(cart)
        logger.info(
            "Set %s (%s) to %d in cart of %s", spec.product_id, period, quantity.value, customer_name
        )
        return cart_to_dto(cart)


class RemoveFromCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(
        self,
        customer_name: str,
        product_id: str,
        start: date,
        end: date,
        variant_id: str | None = None,
    ) -> CartDTO:
        cart = _load_cart(self._cart_repo, customer_name)
        cart.remove(product_id, variant_id, RentalPeriod(start, end))
        self._cart_repo.save(cart)
        return cart_to_dto(cart)


class ClearCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, customer_name: str) -> CartDTO:
        cart = self._cart_repo.get_for_customer(customer_name)
        if cart is None:
            return cart_to_dto(Cart(customer_name=customer_name))
        cart.clear()
        self._cart_repo.save(cart)
        return cart_to_dto(cart)


def _load_cart(cart_repo: CartRepository, customer_name: str) -> Cart:
    cart = cart_repo.get_for_customer(customer_name)
    if cart is None or cart.is_empty:
        raise ValidationError("Cart is empty")
    return cart


def cart_to_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        customer_name=cart.customer_name,
        items=[line_to_dto(item) for item in cart.items],
        item_count=sum(item.quantity.value for item in cart.items),
    )
