"""Application service: List Shipping Methods use case (query)."""

from __future__ import annotations

from decimal import Decimal

from storefront.application.checkout_pricing import validated_country
from storefront.application.dto import ShippingMethodDTO
from storefront.domain.model.shipping import ShippingRates
from storefront.domain.model.value_objects import Money
from storefront.domain.service.shipping_catalog import methods_for_country


class ListShippingMethodsHandler:

    def __init__(self, rates: ShippingRates) -> None:
        self._rates = rates

    def handle(self, country_code: str, subtotal: str | Decimal) -> list[ShippingMethodDTO]:
        """An empty list means checkout cannot continue for this country."""
        country = validated_country(country_code)
        return [
            ShippingMethodDTO(
                id=m.id,
                name=m.name,
                description=m.description,
                price=str(m.price),
                estimated_days=m.estimated_days,
            )
            for m in methods_for_country(
                country, Money.of(subtotal, self._rates.baltic.currency), self._rates
            )
        ]
