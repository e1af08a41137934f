"""Domain service: Order Snapshot Builder.

Freezes a computed summary, the chosen shipping method and the cart lines
into an OrderSnapshot.  Product display data is copied from the catalog
as it is right now; after this point the order never looks at the
catalog again.

The builder is pure.  Persisting the snapshot (and with it the
idempotency key) is the job of the placement unit of work.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from datetime import datetime

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.order import OrderLineSnapshot, OrderSnapshot
from storefront.domain.model.price_summary import PriceSummary
from storefront.domain.model.promo_code import PromoCode
from storefront.domain.model.shipping import ShippingMethod
from storefront.domain.repository.product_catalog import ProductCatalog


def request_fingerprint(*parts: object) -> str:
    """Stable hash of the request fields an idempotency key is bound to."""
    joined = "\x1f".join("" if p is None else str(p) for p in parts)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def freeze(
    summary: PriceSummary,
    lines: Sequence[CartLine],
    shipping_method: ShippingMethod,
    promo: PromoCode | None,
    *,
    catalog: ProductCatalog,
    cart_id: str,
    country_code: str,
    idempotency_key: str,
    fingerprint: str,
    created_at: datetime,
    user_id: int | None = None,
    email: str | None = None,
) -> OrderSnapshot:
    if not lines:
        raise ValidationError("Order must contain at least one item")
    if summary.shipping_cost != shipping_method.price:
        raise ValidationError("Summary was not computed for this shipping method")

    frozen_lines: list[OrderLineSnapshot] = []
    for line in lines:
        info = catalog.get_info(line.product_id, line.variant_id)
        if info is None:
            raise EntityNotFoundError(f"Product not found: '{line.product_id}'")
        frozen_lines.append(
            OrderLineSnapshot(
                product_id=line.product_id,
                variant_id=line.variant_id,
                product_name=info.name,
                sku=info.sku,
                image_url=info.image_url,
                quantity=line.quantity,
                unit_price=line.unit_price,  # <-- price snapshot
                original_unit_price=line.original_unit_price,
            )
        )

    return OrderSnapshot(
        id=None,
        idempotency_key=idempotency_key,
        request_fingerprint=fingerprint,
        cart_id=cart_id,
        country_code=country_code,
        lines=tuple(frozen_lines),
        summary=summary,
        shipping_method=shipping_method,
        promo_code=promo.code if promo else None,
        promo_formatted_value=promo.formatted_value if promo else None,
        user_id=user_id,
        email=email,
        created_at=created_at,
    )
