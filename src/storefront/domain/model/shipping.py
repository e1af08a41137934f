"""Shipping zones and the methods offered inside them."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from storefront.domain.model.value_objects import Money


class ShippingZone(Enum):
    BALTIC = "BALTIC"
    INTERNATIONAL = "INTERNATIONAL"
    EU = "EU"
    NORTH_AMERICA = "NORTH_AMERICA"
    UNSUPPORTED = "UNSUPPORTED"


@dataclass(frozen=True)
class ShippingMethod:
    """A priced shipping option, built fresh for every pricing request."""

    id: str
    name: str
    description: str
    price: Money
    estimated_days: str

    @property
    def is_free(self) -> bool:
        return self.price.is_zero


@dataclass(frozen=True)
class ShippingRates:
    """Flat carrier rates and the free-shipping rule.

    The free-shipping threshold applies to one country only, even though
    that country shares its zone and carrier with others.
    """

    baltic: Money = Money(Decimal("4.00"))
    international: Money = Money(Decimal("4.00"))
    carrier: Money = Money(Decimal("20.00"))
    free_shipping_threshold: Money = Money(Decimal("50.00"))
    free_shipping_country: str = "LT"
