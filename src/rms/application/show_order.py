"""Application service: Show Order use case (query)."""

from __future__ import annotations

from rms.application.dto import OrderDTO, ReservationDTO
from rms.application.mappers import order_to_dto, reservation_to_dto
from rms.domain.exceptions import EntityNotFoundError
from rms.domain.repository.order_repository import OrderRepository
from rms.domain.repository.reservation_repository import ReservationRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._order_repo = order_repo
        self._reservation_repo = reservation_repo

    def handle(self, order_id: int) -> tuple[OrderDTO, list[ReservationDTO]]:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        reservations = self._reservation_repo.list_for_order(order_id)
        return order_to_dto(order), [reservation_to_dto(r) for r in reservations]
