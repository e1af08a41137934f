"""Order snapshot: the persisted, historical record of a placed order.

Everything a past order displays lives inside the snapshot itself:
product names, SKUs, images and prices are captured at placement time, and
the promo code is referenced by its string.  Later catalog or promo edits
therefore never change what a placed order shows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from storefront.domain.model.price_summary import PriceSummary
from storefront.domain.model.shipping import ShippingMethod
from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class OrderLineSnapshot:
    """A line item with its price locked at order-creation time."""

    product_id: str
    variant_id: str | None
    product_name: str
    sku: str
    image_url: str | None
    quantity: Quantity
    unit_price: Money
    original_unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class OrderSnapshot:
    """Immutable record of a placed order.

    ``id`` is ``None`` until the repository assigns one; the repository
    stores a copy carrying the id.
    """

    id: int | None
    idempotency_key: str
    request_fingerprint: str
    cart_id: str
    country_code: str
    lines: tuple[OrderLineSnapshot, ...]
    summary: PriceSummary
    shipping_method: ShippingMethod
    promo_code: str | None
    promo_formatted_value: str | None
    user_id: int | None
    email: str | None
    created_at: datetime

    @property
    def total(self) -> Money:
        return self.summary.total

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)
