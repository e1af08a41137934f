"""Domain service: Promo Code Evaluator.

Validates a customer-entered code against its constraints and computes
the discount.  Checks run in a fixed order and the first failure wins:

  1. exists                      -> PromoNotFound
  2. enabled                     -> PromoInactive
  3. account required            -> PromoLoginRequired
  4. active window               -> PromoNotYetActive / PromoExpired
  5. minimum cart total          -> PromoBelowMinimum
  6. global usage limit          -> PromoUsageLimitReached
  7. per-customer usage limit    -> PromoAlreadyUsedByCustomer

Evaluation never mutates anything.  Usage is recorded by the order
placement unit of work once the order is actually written.
"""

from __future__ import annotations

from datetime import datetime

from storefront.domain.exceptions import (
    PromoAlreadyUsedByCustomer,
    PromoBelowMinimum,
    PromoExpired,
    PromoInactive,
    PromoLoginRequired,
    PromoNotFound,
    PromoNotYetActive,
    PromoUsageLimitReached,
)
from storefront.domain.model.promo_code import DiscountOutcome, PromoCode, normalize_code
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.promo_code_repository import PromoCodeRepository


class PromoCodeEvaluator:

    def __init__(self, promo_repo: PromoCodeRepository) -> None:
        self._promo_repo = promo_repo

    def evaluate(
        self,
        code: str,
        cart_total: Money,
        now: datetime,
        user_id: int | None = None,
        email: str | None = None,
    ) -> DiscountOutcome:
        promo = self.check(code, cart_total, now, user_id=user_id, email=email)
        return DiscountOutcome(
            promo_code=promo,
            discount_amount=promo.calculate_discount(cart_total),
        )

    def check(
        self,
        code: str,
        cart_total: Money,
        now: datetime,
        user_id: int | None = None,
        email: str | None = None,
    ) -> PromoCode:
        """Return the promo code if it may be applied, otherwise raise."""
        normalized = normalize_code(code)
        promo = self._promo_repo.get_by_code(normalized) if normalized else None
        if promo is None:
            raise PromoNotFound(f"Promo code '{normalized}' is not valid")

        if not promo.is_active:
            raise PromoInactive(f"Promo code '{promo.code}' is no longer active")

        if promo.requires_account and user_id is None:
            raise PromoLoginRequired(
                f"Promo code '{promo.code}' is only available to registered customers"
            )

        if promo.is_not_yet_active(now):
            raise PromoNotYetActive(f"Promo code '{promo.code}' is not active yet")
        if promo.is_expired(now):
            raise PromoExpired(f"Promo code '{promo.code}' has expired")

        if not promo.meets_minimum(cart_total):
            raise PromoBelowMinimum(
                f"Promo code '{promo.code}' requires a minimum order of {promo.min_cart_total}",
                minimum=promo.min_cart_total,  # type: ignore[arg-type]
            )

        if promo.usage_limit_reached:
            raise PromoUsageLimitReached(
                f"Promo code '{promo.code}' has reached its usage limit"
            )

        if promo.per_user_limit is not None and (user_id is not None or email):
            used = self._promo_repo.count_usages(promo.code, user_id, email)
            if promo.customer_limit_reached(used):
                raise PromoAlreadyUsedByCustomer(
                    f"You have already used promo code '{promo.code}'"
                )

        return promo
