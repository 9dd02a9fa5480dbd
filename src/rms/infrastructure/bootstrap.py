"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from rms.infrastructure.config import get_settings
from rms.infrastructure.persistence.json_cart_repository import JsonCartRepository
from rms.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from rms.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from rms.infrastructure.persistence.sql_reservation_repository import (
    SqlReservationRepository,
    create_reservation_engine,
)


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(get_settings().data_dir / "products.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(get_settings().data_dir / "orders.json")


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(get_settings().data_dir / "carts.json")


@lru_cache()
def reservation_repository() -> SqlReservationRepository:
    # One instance per process so every caller shares the per-product locks.
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    engine = create_reservation_engine(
        settings.reservation_database_url, busy_timeout=settings.sqlite_busy_timeout
    )
    return SqlReservationRepository(engine)


def conflict_retries() -> int:
    return get_settings().conflict_retries
