"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Every error here is recoverable: the customer adjusts cart, code or
destination and tries again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront.domain.model.value_objects import Money


class DomainException(Exception):
    """Base class for all domain errors."""

    key = "error"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    key = "validation"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    key = "not_found"


# --- Promo codes --------------------------------------------------------------


class PromoError(DomainException):
    """A promo code cannot be applied to this checkout."""

    key = "promo_code.invalid"


class PromoNotFound(PromoError):
    key = "promo_code.invalid"


class PromoInactive(PromoError):
    key = "promo_code.inactive"


class PromoLoginRequired(PromoError):
    key = "promo_code.login_required"


class PromoNotYetActive(PromoError):
    key = "promo_code.not_yet_active"


class PromoExpired(PromoError):
    key = "promo_code.expired"


class PromoBelowMinimum(PromoError):
    """Cart total is under the code's minimum; carries the minimum for display."""

    key = "promo_code.minimum_not_met"

    def __init__(self, message: str, minimum: Money) -> None:
        super().__init__(message)
        self.minimum = minimum


class PromoUsageLimitReached(PromoError):
    key = "promo_code.usage_limit_reached"


class PromoAlreadyUsedByCustomer(PromoError):
    key = "promo_code.per_user_limit_reached"


class PromoInvalidated(PromoError):
    """A submitted promo failed its re-check at order placement.

    ``reason_key`` is the key of the check that failed.
    """

    key = "promo_code.invalidated"

    def __init__(self, message: str, reason_key: str) -> None:
        super().__init__(message)
        self.reason_key = reason_key


# --- Shipping -----------------------------------------------------------------


class ShippingUnavailable(DomainException):
    """No shipping method serves the destination country."""

    key = "checkout.shipping_not_available"


class InvalidShippingMethod(ValidationError):
    """The requested method is not offered for the destination."""

    key = "checkout.invalid_shipping_method"


# --- Order placement ----------------------------------------------------------


class PriceMismatch(DomainException):
    """Client-side total disagrees with the server-side computation."""

    key = "checkout.price_mismatch"

    def __init__(self, client_total: Money, server_total: Money) -> None:
        super().__init__(
            f"Submitted total {client_total} does not match calculated total {server_total}"
        )
        self.client_total = client_total
        self.server_total = server_total


class OrderPlacementFailed(DomainException):
    """Persistence failed; nothing was written and the request may be retried."""

    key = "checkout.order_placement_failed"
