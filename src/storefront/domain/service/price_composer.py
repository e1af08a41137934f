"""Domain service: Price Summary Composer.

Combines cart lines, the chosen shipping method, an optional promo and
the tax rate into a PriceSummary.  The same function runs for checkout
previews and for the authoritative computation at order placement.

Steps:
  1. original subtotal  = sum(original unit price * quantity)
  2. subtotal           = sum(unit price * quantity)
     product discount   = original subtotal - subtotal
  3. promo discount     = re-derived from the promo against the subtotal
                          above; zero (and flagged) if the promo no longer
                          meets its minimum
  4. total              = max(subtotal + shipping - promo discount, 0)
  5. net subtotal / tax = reverse-derived from the tax-inclusive subtotal;
                          informational only, ``total`` is unaffected
"""

from __future__ import annotations

from collections.abc import Sequence

from storefront.domain.model.cart import CartLine
from storefront.domain.model.price_summary import PriceSummary
from storefront.domain.model.promo_code import DiscountOutcome
from storefront.domain.model.shipping import ShippingMethod
from storefront.domain.model.value_objects import Money, TaxRate


def compose(
    lines: Sequence[CartLine],
    shipping_method: ShippingMethod,
    promo: DiscountOutcome | None,
    tax_rate: TaxRate,
) -> PriceSummary:
    currency = shipping_method.price.currency

    original_subtotal = Money.zero(currency)
    subtotal = Money.zero(currency)
    for line in lines:
        original_subtotal = original_subtotal + line.original_line_total
        subtotal = subtotal + line.line_total
    original_subtotal = original_subtotal.rounded()
    subtotal = subtotal.rounded()
    product_discount = original_subtotal.minus_floor_zero(subtotal)

    promo_discount, promo_invalidated = _promo_discount(promo, subtotal)

    shipping_cost = shipping_method.price.rounded()
    total = (subtotal + shipping_cost).minus_floor_zero(promo_discount)

    subtotal_excl_tax = tax_rate.exclusive_part(subtotal)
    tax_amount = subtotal - subtotal_excl_tax

    return PriceSummary(
        original_subtotal=original_subtotal,
        product_discount=product_discount,
        subtotal=subtotal,
        subtotal_excl_tax=subtotal_excl_tax,
        tax_amount=tax_amount,
        shipping_cost=shipping_cost,
        promo_discount=promo_discount,
        total=total,
        promo_invalidated=promo_invalidated,
    )


def _promo_discount(promo: DiscountOutcome | None, subtotal: Money) -> tuple[Money, bool]:
    """Never trust the amount carried by ``promo``; recompute it."""
    if promo is None:
        return Money.zero(subtotal.currency), False
    if not promo.promo_code.meets_minimum(subtotal):
        return Money.zero(subtotal.currency), True
    return promo.promo_code.calculate_discount(subtotal), False
