"""JSON-file-backed implementation of OrderRepository.

Stores complete snapshots: every displayed field of an order is read back
from this file, never from the catalog.  Staging works as in
JsonPromoCodeRepository: per thread, so a placement in progress is
invisible to every other thread until it commits.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderLineSnapshot, OrderSnapshot
from storefront.domain.model.price_summary import PriceSummary
from storefront.domain.model.shipping import ShippingMethod
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile, StagedRecords

_SUMMARY_FIELDS = (
    "original_subtotal",
    "product_discount",
    "subtotal",
    "subtotal_excl_tax",
    "tax_amount",
    "shipping_cost",
    "promo_discount",
    "total",
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        self._local = threading.local()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._orders()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> OrderSnapshot | None:
        for raw in self._orders():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_idempotency_key(self, key: str) -> OrderSnapshot | None:
        for raw in self._orders():
            if raw["idempotency_key"] == key:
                return self._to_domain(raw)
        return None

    def save(self, snapshot: OrderSnapshot) -> int:
        orders = self._orders()
        if any(o["idempotency_key"] == snapshot.idempotency_key for o in orders):
            raise ValidationError(
                f"An order with idempotency key '{snapshot.idempotency_key}' already exists"
            )
        if snapshot.id is None:
            snapshot = replace(snapshot, id=self.next_id())
        orders.append(self._to_raw(snapshot))
        if self._staged is None:
            self._file.persist(orders)
        return snapshot.id  # type: ignore[return-value]

    # --- Staging (driven by JsonUnitOfWork) -----------------------------------

    def begin(self) -> None:
        self._local.staged = StagedRecords.load(self._file)

    def pending_writes(self) -> list[StagedRecords]:
        return [self._staged] if self._staged is not None else []

    def discard(self) -> None:
        self._local.staged = None

    @property
    def _staged(self) -> StagedRecords | None:
        return getattr(self._local, "staged", None)

    # --- Serialization --------------------------------------------------------

    def _orders(self) -> list[dict]:
        staged = self._staged
        return staged.records if staged is not None else self._file.load()

    @staticmethod
    def _to_raw(snapshot: OrderSnapshot) -> dict:
        method = snapshot.shipping_method
        return {
            "id": snapshot.id,
            "idempotency_key": snapshot.idempotency_key,
            "request_fingerprint": snapshot.request_fingerprint,
            "cart_id": snapshot.cart_id,
            "country_code": snapshot.country_code,
            "currency": snapshot.summary.currency,
            "created_at": snapshot.created_at.isoformat(),
            "user_id": snapshot.user_id,
            "email": snapshot.email,
            "promo_code": snapshot.promo_code,
            "promo_formatted_value": snapshot.promo_formatted_value,
            "shipping_method": {
                "id": method.id,
                "name": method.name,
                "description": method.description,
                "price": str(method.price.amount),
                "estimated_days": method.estimated_days,
            },
            "summary": {
                **{name: str(getattr(snapshot.summary, name).amount) for name in _SUMMARY_FIELDS},
                "promo_invalidated": snapshot.summary.promo_invalidated,
            },
            "items": [
                {
                    "product_id": line.product_id,
                    "variant_id": line.variant_id,
                    "product_name": line.product_name,
                    "sku": line.sku,
                    "image_url": line.image_url,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "original_unit_price": str(line.original_unit_price.amount),
                }
                for line in snapshot.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> OrderSnapshot:
        currency = raw.get("currency", "EUR")

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        method = raw["shipping_method"]
        summary = raw["summary"]
        return OrderSnapshot(
            id=raw["id"],
            idempotency_key=raw["idempotency_key"],
            request_fingerprint=raw["request_fingerprint"],
            cart_id=raw["cart_id"],
            country_code=raw["country_code"],
            lines=tuple(
                OrderLineSnapshot(
                    product_id=i["product_id"],
                    variant_id=i.get("variant_id"),
                    product_name=i["product_name"],
                    sku=i.get("sku", ""),
                    image_url=i.get("image_url"),
                    quantity=Quantity(i["quantity"]),
                    unit_price=money(i["unit_price"]),
                    original_unit_price=money(i["original_unit_price"]),
                )
                for i in raw["items"]
            ),
            summary=PriceSummary(
                **{name: money(summary[name]) for name in _SUMMARY_FIELDS},
                promo_invalidated=summary.get("promo_invalidated", False),
            ),
            shipping_method=ShippingMethod(
                id=method["id"],
                name=method["name"],
                description=method["description"],
                price=money(method["price"]),
                estimated_days=method["estimated_days"],
            ),
            promo_code=raw.get("promo_code"),
            promo_formatted_value=raw.get("promo_formatted_value"),
            user_id=raw.get("user_id"),
            email=raw.get("email"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
