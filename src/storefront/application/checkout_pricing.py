"""The composition path shared by checkout preview and order placement.

cart lines -> subtotal -> shipping method -> promo evaluation -> summary
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

import structlog

from storefront.domain.exceptions import PromoError, ShippingUnavailable, ValidationError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.price_summary import PriceSummary
from storefront.domain.model.promo_code import DiscountOutcome
from storefront.domain.model.shipping import ShippingMethod, ShippingRates
from storefront.domain.model.value_objects import Money, TaxRate
from storefront.domain.service.country_classifier import (
    is_valid_country_code,
    normalize_country,
)
from storefront.domain.service.price_composer import compose
from storefront.domain.service.promo_evaluator import PromoCodeEvaluator
from storefront.domain.service.shipping_catalog import find_method, methods_for_country

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PricedCheckout:
    summary: PriceSummary
    shipping_method: ShippingMethod
    promo: DiscountOutcome | None


def validated_country(country_code: str) -> str:
    if not is_valid_country_code(country_code):
        raise ValidationError(f"Invalid country code: {country_code!r}")
    return normalize_country(country_code)


def price_checkout(
    lines: Sequence[CartLine],
    country_code: str,
    shipping_method_id: str | None,
    promo_code: str | None,
    *,
    evaluator: PromoCodeEvaluator,
    tax_rate: TaxRate,
    rates: ShippingRates,
    now: datetime,
    user_id: int | None = None,
    email: str | None = None,
) -> PricedCheckout:
    """Price ``lines`` for a destination.

    Without ``shipping_method_id`` the first method the destination offers
    is used.
    """
    if not lines:
        raise ValidationError("Cart is empty")
    zero = Money.zero(rates.baltic.currency)
    subtotal = sum((line.line_total for line in lines), zero).rounded()

    if shipping_method_id:
        method = find_method(country_code, shipping_method_id, subtotal, rates)
    else:
        available = methods_for_country(country_code, subtotal, rates)
        if not available:
            raise ShippingUnavailable(f"Shipping to '{country_code}' is not available")
        method = available[0]

    outcome = None
    if promo_code and promo_code.strip():
        try:
            outcome = evaluator.evaluate(promo_code, subtotal, now, user_id=user_id, email=email)
        except PromoError as exc:
            logger.info("promo_rejected", code=promo_code, error_key=exc.key)
            raise

    summary = compose(lines, method, outcome, tax_rate)
    return PricedCheckout(summary=summary, shipping_method=method, promo=outcome)
