"""Shipping Method Catalog.

Enumerates the methods a zone offers, in declaration order (courier
before pickup point), and prices them for a given subtotal.

Pricing:
- Baltic: courier and pickup point at the flat Baltic rate; free when the
  destination is the free-shipping country and the subtotal reaches the
  threshold (``>=``).  Other Baltic countries always pay the flat rate.
- International: courier only, flat international rate.
- EU / North America: international carrier courier, flat carrier rate;
  only the transit estimate differs.
- Unsupported: nothing.
"""

from __future__ import annotations

from storefront.domain.exceptions import InvalidShippingMethod, ShippingUnavailable
from storefront.domain.model.shipping import ShippingMethod, ShippingRates, ShippingZone
from storefront.domain.model.value_objects import Money
from storefront.domain.service.country_classifier import classify, normalize_country

VENIPAK_COURIER = "venipak-courier"
VENIPAK_PICKUP = "venipak-pickup"
FEDEX_COURIER = "fedex-courier"

DEFAULT_RATES = ShippingRates()


def methods(
    zone: ShippingZone,
    subtotal: Money,
    country_code: str = "",
    rates: ShippingRates = DEFAULT_RATES,
) -> list[ShippingMethod]:
    """Return the priced methods for ``zone``; empty for unsupported zones."""
    if zone is ShippingZone.BALTIC:
        price = _baltic_price(subtotal, normalize_country(country_code), rates)
        return [
            ShippingMethod(
                id=VENIPAK_COURIER,
                name="Venipak courier",
                description="Delivered to your door",
                price=price,
                estimated_days="1-3 business days",
            ),
            ShippingMethod(
                id=VENIPAK_PICKUP,
                name="Venipak pickup point",
                description="Collect from a pickup point or parcel locker",
                price=price,
                estimated_days="1-3 business days",
            ),
        ]

    if zone is ShippingZone.INTERNATIONAL:
        return [
            ShippingMethod(
                id=VENIPAK_COURIER,
                name="Venipak courier",
                description="Delivered to your door",
                price=rates.international,
                estimated_days="3-5 business days",
            ),
        ]

    if zone is ShippingZone.EU:
        return [_fedex(rates, "3-5 business days")]

    if zone is ShippingZone.NORTH_AMERICA:
        return [_fedex(rates, "5-10 business days")]

    return []


def methods_for_country(
    country_code: str,
    subtotal: Money,
    rates: ShippingRates = DEFAULT_RATES,
) -> list[ShippingMethod]:
    return methods(classify(country_code), subtotal, country_code, rates)


def find_method(
    country_code: str,
    method_id: str,
    subtotal: Money,
    rates: ShippingRates = DEFAULT_RATES,
) -> ShippingMethod:
    """Resolve the method a customer picked for ``country_code``.

    Raises ShippingUnavailable when the destination is not served at all,
    InvalidShippingMethod when it is served but not by ``method_id``.
    """
    available = methods_for_country(country_code, subtotal, rates)
    if not available:
        raise ShippingUnavailable(
            f"Shipping to '{normalize_country(country_code)}' is not available"
        )
    for method in available:
        if method.id == method_id:
            return method
    offered = ", ".join(m.id for m in available)
    raise InvalidShippingMethod(
        f"Shipping method '{method_id}' is not available for "
        f"{normalize_country(country_code)} (available: {offered})"
    )


# --- Internal helpers ---------------------------------------------------------


def _baltic_price(subtotal: Money, country_code: str, rates: ShippingRates) -> Money:
    if (
        country_code == rates.free_shipping_country
        and subtotal >= rates.free_shipping_threshold
    ):
        return Money.zero(rates.baltic.currency)
    return rates.baltic


def _fedex(rates: ShippingRates, estimated_days: str) -> ShippingMethod:
    return ShippingMethod(
        id=FEDEX_COURIER,
        name="FedEx courier",
        description="International express delivery",
        price=rates.carrier,
        estimated_days=estimated_days,
    )
