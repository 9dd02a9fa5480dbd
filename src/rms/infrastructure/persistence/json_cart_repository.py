"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from rms.domain.model.cart import Cart, CartItem
from rms.domain.model.value_objects import Quantity, RentalPeriod
from rms.domain.repository.cart_repository import CartRepository


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def get_for_customer(self, customer_name: str) -> Cart | None:
        for raw in self._load_raw():
            if raw["customer_name"] == customer_name:
                return self._to_domain(raw)
        return None

    def save(self, cart: Cart) -> None:
        carts = [c for c in self._load_raw() if c["customer_name"] != cart.customer_name]
        carts.append(self._to_raw(cart))
        self._persist_raw(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "customer_name": cart.customer_name,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "variant_id": item.variant_id,
                    "quantity": item.quantity.value,
                    "start": item.period.start.isoformat(),
                    "end": item.period.end.isoformat(),
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            customer_name=raw["customer_name"],
            items=[
                CartItem(
                    product_id=i["product_id"],
                    product_name=i["product_name"],
                    quantity=Quantity(i["quantity"]),
                    period=RentalPeriod(date.fromisoformat(i["start"]), date.fromisoformat(i["end"])),
                    variant_id=i.get("variant_id"),
                )
                for i in raw["items"]
            ],
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, carts: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(carts, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
