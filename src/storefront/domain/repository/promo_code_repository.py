"""Abstract repository for promo codes and their usage records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace

from storefront.domain.exceptions import (
    PromoAlreadyUsedByCustomer,
    PromoNotFound,
    PromoUsageLimitReached,
)
from storefront.domain.model.promo_code import PromoCode, PromoUsage, normalize_code


class PromoCodeRepository(ABC):

    @abstractmethod
    def get_by_code(self, code: str) -> PromoCode | None:
        """Return a promo code by its (normalized) code, or None."""

    @abstractmethod
    def save(self, promo: PromoCode) -> None:
        """Persist a new or updated promo code."""

    @abstractmethod
    def list_usages(self, code: str) -> list[PromoUsage]:
        """Return every recorded use of ``code``."""

    @abstractmethod
    def add_usage(self, usage: PromoUsage) -> None:
        """Record one use of a promo code."""

    # --- Derived operations ---------------------------------------------------

    def count_usages(self, code: str, user_id: int | None, email: str | None) -> int:
        """How many times this customer has used ``code``."""
        return sum(
            1 for usage in self.list_usages(normalize_code(code))
            if usage.belongs_to(user_id, email)
        )

    def increment_usage(self, usage: PromoUsage) -> PromoCode:
        """Record ``usage`` and bump the global counter.

        Re-checks the global and per-customer limits against current
        state.  Must run inside the unit of work that saves the order, so
        the check and the increment are atomic with respect to other
        placements.
        """
        code = normalize_code(usage.code)
        promo = self.get_by_code(code)
        if promo is None:
            raise PromoNotFound(f"Promo code '{code}' not found")
        if promo.usage_limit_reached:
            raise PromoUsageLimitReached(f"Promo code '{code}' has reached its usage limit")
        if promo.customer_limit_reached(self.count_usages(code, usage.user_id, usage.email)):
            raise PromoAlreadyUsedByCustomer(f"You have already used promo code '{code}'")

        updated = promo.with_use()
        self.save(updated)
        self.add_usage(replace(usage, code=code))
        return updated
