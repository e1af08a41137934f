"""Application service: Preview Summary use case (query).

Recomputed on every change in the checkout form.  Safe to call any number
of times: nothing is written and no promo use is consumed.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from storefront.application.checkout_pricing import price_checkout, validated_country
from storefront.domain.model.price_summary import PriceSummary
from storefront.domain.model.shipping import ShippingRates
from storefront.domain.model.value_objects import TaxRate
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.promo_code_repository import PromoCodeRepository
from storefront.domain.service.promo_evaluator import PromoCodeEvaluator

logger = structlog.get_logger(__name__)


class PreviewSummaryHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        promo_repo: PromoCodeRepository,
        tax_rate: TaxRate,
        rates: ShippingRates,
    ) -> None:
        self._cart_repo = cart_repo
        self._evaluator = PromoCodeEvaluator(promo_repo)
        self._tax_rate = tax_rate
        self._rates = rates

    def handle(
        self,
        cart_id: str,
        country_code: str,
        promo_code: str | None = None,
        shipping_method_id: str | None = None,
        user_id: int | None = None,
        email: str | None = None,
        now: datetime | None = None,
    ) -> PriceSummary:
        country = validated_country(country_code)
        priced = price_checkout(
            self._cart_repo.get_lines(cart_id),
            country,
            shipping_method_id,
            promo_code,
            evaluator=self._evaluator,
            tax_rate=self._tax_rate,
            rates=self._rates,
            now=now or datetime.now(timezone.utc),
            user_id=user_id,
            email=email,
        )
        logger.debug(
            "preview_computed",
            cart_id=cart_id,
            country=country,
            method=priced.shipping_method.id,
            total=str(priced.summary.total),
        )
        return priced.summary
