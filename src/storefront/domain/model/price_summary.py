"""The priced summary of a checkout."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class PriceSummary:
    """Immutable order totals.

    Invariants:
    - ``subtotal == original_subtotal - product_discount``
    - ``subtotal == subtotal_excl_tax + tax_amount``
    - ``total == max(subtotal + shipping_cost - promo_discount, 0)``

    ``promo_invalidated`` is set when a promo handed to the composer no
    longer qualifies for the real subtotal; its discount is then zero.
    """

    original_subtotal: Money
    product_discount: Money
    subtotal: Money
    subtotal_excl_tax: Money
    tax_amount: Money
    shipping_cost: Money
    promo_discount: Money
    total: Money
    promo_invalidated: bool = False

    def __post_init__(self) -> None:
        if self.original_subtotal.minus_floor_zero(self.product_discount) != self.subtotal:
            raise ValidationError("Subtotal must equal original subtotal minus product discount")
        if self.subtotal_excl_tax + self.tax_amount != self.subtotal:
            raise ValidationError("Subtotal must equal net subtotal plus tax")
        gross = self.subtotal + self.shipping_cost
        if self.total != gross.minus_floor_zero(self.promo_discount):
            raise ValidationError("Total must equal subtotal plus shipping minus promo discount")

    @property
    def currency(self) -> str:
        return self.total.currency

    @property
    def total_savings(self) -> Money:
        return self.product_discount + self.promo_discount
