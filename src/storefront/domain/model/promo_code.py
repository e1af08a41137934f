"""Promo codes and their usage records.

A PromoCode is edited by the back-office and only ever read by the
pricing engine.  Its usage counter moves exclusively through
``PromoCodeRepository.increment_usage`` inside the order-placement unit of
work, so a checkout that is previewed but never placed consumes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


class PromoType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    """Codes are matched case-insensitively and stored upper-case."""
    return code.strip().upper()


@dataclass(frozen=True)
class PromoCode:
    """A discount token together with its eligibility constraints.

    Every constraint is optional; ``None`` means "not restricted".
    """

    code: str
    type: PromoType
    value: Decimal
    description: str = ""
    min_cart_total: Money | None = None
    max_discount_amount: Money | None = None
    max_uses: int | None = None
    per_user_limit: int | None = None
    times_used: int = 0
    active_from: datetime | None = None
    expires_at: datetime | None = None
    is_active: bool = True
    requires_account: bool = False

    def __post_init__(self) -> None:
        if not self.code or not self.code.strip():
            raise ValidationError("Promo code is required")
        if self.code != normalize_code(self.code):
            raise ValidationError(f"Promo code '{self.code}' must be upper-case and trimmed")
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Promo value must be a Decimal, got {type(self.value).__name__}"
            )
        if self.type is PromoType.PERCENTAGE and not Decimal("0") < self.value <= Decimal("100"):
            raise ValidationError("Percentage promo value must be in (0, 100]")
        if self.type is PromoType.FIXED and self.value <= 0:
            raise ValidationError("Fixed promo value must be greater than zero")
        if self.max_uses is not None and self.max_uses < 0:
            raise ValidationError("Maximum uses cannot be negative")
        if self.per_user_limit is not None and self.per_user_limit < 0:
            raise ValidationError("Per-customer limit cannot be negative")
        if self.times_used < 0:
            raise ValidationError("Usage count cannot be negative")

    # --- Eligibility ----------------------------------------------------------

    def is_not_yet_active(self, now: datetime) -> bool:
        return self.active_from is not None and self.active_from > now

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def meets_minimum(self, cart_total: Money) -> bool:
        if self.min_cart_total is None:
            return True
        return cart_total >= self.min_cart_total

    @property
    def usage_limit_reached(self) -> bool:
        if self.max_uses is None:
            return False
        return self.times_used >= self.max_uses

    def customer_limit_reached(self, customer_uses: int) -> bool:
        if self.per_user_limit is None:
            return False
        return customer_uses >= self.per_user_limit

    # --- Discount -------------------------------------------------------------

    def calculate_discount(self, cart_total: Money) -> Money:
        """Discount for ``cart_total``; never more than the cart total itself."""
        if self.type is PromoType.PERCENTAGE:
            discount = cart_total.percent(self.value)
            if self.max_discount_amount is not None and discount > self.max_discount_amount:
                discount = self.max_discount_amount
        else:
            discount = Money(self.value, cart_total.currency)
        if discount > cart_total:
            discount = cart_total
        return discount.rounded()

    @property
    def formatted_value(self) -> str:
        if self.type is PromoType.PERCENTAGE:
            return f"{self.value.normalize():f}%"
        return str(Money(self.value).rounded())

    def with_use(self) -> PromoCode:
        return replace(self, times_used=self.times_used + 1)


@dataclass(frozen=True)
class PromoUsage:
    """One confirmed use of a promo code by a placed order."""

    code: str
    order_id: int
    user_id: int | None
    email: str | None
    discount_amount: Money

    def belongs_to(self, user_id: int | None, email: str | None) -> bool:
        """Authenticated customers are matched by id, guests by e-mail."""
        if user_id is not None:
            return self.user_id == user_id
        if email:
            return (self.email or "").lower() == email.lower()
        return False


@dataclass(frozen=True)
class DiscountOutcome:
    """Result of a successful promo evaluation.

    Keeps the evaluated code so the amount can be re-derived against the
    authoritative subtotal instead of trusting a previously computed one.
    """

    promo_code: PromoCode
    discount_amount: Money

    @property
    def code(self) -> str:
        return self.promo_code.code

    @property
    def formatted_value(self) -> str:
        return self.promo_code.formatted_value
