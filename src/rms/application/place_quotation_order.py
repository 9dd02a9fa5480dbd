"""Application service: Place Quotation Order use case.

Converts an accepted vendor quotation into a confirmed rental order.
Quotation lines go through exactly the same reservation flow as cart
lines; only the line item kind differs.
"""

from __future__ import annotations

from rms.application.checkout import place_order
from rms.application.dto import OrderDTO, RentalItemSpec
from rms.application.mappers import order_to_dto
from rms.domain.exceptions import EntityNotFoundError, ValidationError
from rms.domain.model.order import QuotationLineItem, RentalOrder
from rms.domain.model.value_objects import Quantity, RentalPeriod
from rms.domain.repository.order_repository import OrderRepository
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.reservation_repository import ReservationRepository
from rms.domain.service.reservation_manager import DEFAULT_CONFLICT_RETRIES


class PlaceQuotationOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo
        self._conflict_retries = conflict_retries

    def handle(
        self,
        customer_name: str,
        quotation_id: str,
        item_specs: list[RentalItemSpec],
    ) -> OrderDTO:
        if not quotation_id or not quotation_id.strip():
            raise ValidationError("Quotation ID is required")

        line_items: list[QuotationLineItem] = []
        for spec in item_specs:
            product = self._product_repo.get_by_id(spec.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{spec.product_id}' not found")
            line_items.append(
                QuotationLineItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=Quantity(spec.quantity),
                    period=RentalPeriod(spec.start, spec.end),
                    variant_id=spec.variant_id,
                    quotation_id=quotation_id.strip(),
                )
            )

        order = RentalOrder.create(customer_name=customer_name, items=line_items)
        place_order(
            order,
            self._order_repo,
            self._product_repo,
            self._reservation_repo,
            self._conflict_retries,
        )
        return order_to_dto(order)
