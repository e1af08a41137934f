"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.model.order import OrderSnapshot
from storefront.domain.model.price_summary import PriceSummary


@dataclass(frozen=True)
class PlaceOrderRequest:
    """Input: a checkout submission.

    ``client_total`` is the total the customer saw in the preview; it is
    only compared against, never used.
    """

    cart_id: str
    country_code: str
    shipping_method_id: str
    idempotency_key: str
    promo_code: str | None = None
    user_id: int | None = None
    email: str | None = None
    client_total: Decimal | None = None


@dataclass(frozen=True)
class ShippingMethodDTO:
    id: str
    name: str
    description: str
    price: str  # formatted, e.g. "€4.00"
    estimated_days: str


@dataclass(frozen=True)
class PromoValidationDTO:
    """Output of a promo check, shaped for the checkout UI.

    On failure only ``valid``, ``error`` and ``error_key`` are set.
    """

    valid: bool
    code: str | None = None
    type: str | None = None
    value: Decimal | None = None
    discount_amount: Decimal | None = None
    formatted_value: str | None = None
    error: str | None = None
    error_key: str | None = None


@dataclass(frozen=True)
class PriceSummaryDTO:
    original_subtotal: str
    product_discount: str
    subtotal: str
    subtotal_excl_tax: str
    tax_amount: str
    shipping_cost: str
    promo_discount: str
    total: str

    @staticmethod
    def from_summary(summary: PriceSummary) -> PriceSummaryDTO:
        return PriceSummaryDTO(
            original_subtotal=str(summary.original_subtotal),
            product_discount=str(summary.product_discount),
            subtotal=str(summary.subtotal),
            subtotal_excl_tax=str(summary.subtotal_excl_tax),
            tax_amount=str(summary.tax_amount),
            shipping_cost=str(summary.shipping_cost),
            promo_discount=str(summary.promo_discount),
            total=str(summary.total),
        )


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_name: str
    sku: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    country_code: str
    shipping_method: str
    promo_code: str | None
    items: list[OrderLineItemDTO]
    summary: PriceSummaryDTO
    created_at: str

    @staticmethod
    def from_snapshot(snapshot: OrderSnapshot) -> OrderDTO:
        return OrderDTO(
            id=snapshot.id,  # type: ignore[arg-type]
            country_code=snapshot.country_code,
            shipping_method=snapshot.shipping_method.name,
            promo_code=(
                f"{snapshot.promo_code} ({snapshot.promo_formatted_value})"
                if snapshot.promo_code
                else None
            ),
            items=[
                OrderLineItemDTO(
                    product_name=line.product_name,
                    sku=line.sku,
                    quantity=line.quantity.value,
                    unit_price=str(line.unit_price),
                    line_total=str(line.line_total),
                )
                for line in snapshot.lines
            ],
            summary=PriceSummaryDTO.from_summary(snapshot.summary),
            created_at=snapshot.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )
