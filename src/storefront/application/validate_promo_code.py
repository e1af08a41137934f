"""Application service: Validate Promo Code use case (query).

Backs the "apply code" box of the checkout form.  Failures are reported
in the returned DTO rather than raised, together with a stable error key
the UI can translate.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import structlog

from storefront.application.dto import PromoValidationDTO
from storefront.domain.exceptions import PromoError
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.promo_code_repository import PromoCodeRepository
from storefront.domain.service.promo_evaluator import PromoCodeEvaluator

logger = structlog.get_logger(__name__)


class ValidatePromoCodeHandler:

    def __init__(self, promo_repo: PromoCodeRepository) -> None:
        self._evaluator = PromoCodeEvaluator(promo_repo)

    def handle(
        self,
        code: str,
        cart_total: str | Decimal,
        user_id: int | None = None,
        email: str | None = None,
        now: datetime | None = None,
    ) -> PromoValidationDTO:
        total = Money.of(cart_total)
        try:
            outcome = self._evaluator.evaluate(
                code,
                total,
                now or datetime.now(timezone.utc),
                user_id=user_id,
                email=email,
            )
        except PromoError as exc:
            logger.info("promo_rejected", code=code, error_key=exc.key)
            return PromoValidationDTO(valid=False, error=str(exc), error_key=exc.key)

        promo = outcome.promo_code
        return PromoValidationDTO(
            valid=True,
            code=promo.code,
            type=promo.type.value,
            value=promo.value,
            discount_amount=outcome.discount_amount.amount,
            formatted_value=outcome.formatted_value,
        )
