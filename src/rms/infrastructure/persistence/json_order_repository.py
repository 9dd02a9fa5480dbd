"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

from rms.domain.model.order import (
    DirectLineItem,
    LineItemSource,
    OrderStatus,
    QuotationLineItem,
    RentalLineItem,
    RentalOrder,
)
from rms.domain.model.value_objects import Quantity, RentalPeriod
from rms.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._load_raw()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> RentalOrder | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def save(self, order: RentalOrder) -> None:
        orders = self._load_raw()

        if order.id is None:
            order.id = self.next_id()

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(orders):
            if raw["id"] == order.id:
                orders[i] = self._to_raw(order)
                break
        else:
            orders.append(self._to_raw(order))

        self._persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: RentalOrder) -> dict:
        return {
            "id": order.id,
            "customer_name": order.customer_name,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "items": [
                {
                    "source": item.source.value,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "variant_id": item.variant_id,
                    "quantity": item.quantity.value,
                    "start": item.period.start.isoformat(),
                    "end": item.period.end.isoformat(),
                    "quotation_id": getattr(item, "quotation_id", None),
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_line_item(raw: dict) -> RentalLineItem:
        common = dict(
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            quantity=Quantity(raw["quantity"]),
            period=RentalPeriod(date.fromisoformat(raw["start"]), date.fromisoformat(raw["end"])),
            variant_id=raw.get("variant_id"),
        )
        if raw.get("source") == LineItemSource.QUOTATION.value:
            return QuotationLineItem(quotation_id=raw.get("quotation_id") or "", **common)
        return DirectLineItem(**common)

    @classmethod
    def _to_domain(cls, raw: dict) -> RentalOrder:
        return RentalOrder(
            id=raw["id"],
            customer_name=raw["customer_name"],
            items=[cls._to_line_item(i) for i in raw["items"]],
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
