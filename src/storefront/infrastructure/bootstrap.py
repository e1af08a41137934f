"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.domain.model.shipping import ShippingRates
from storefront.domain.model.value_objects import Money, TaxRate
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_catalog import JsonProductCatalog
from storefront.infrastructure.persistence.json_promo_code_repository import (
    JsonPromoCodeRepository,
)
from storefront.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def _settings(settings: Settings | None) -> Settings:
    return settings if settings is not None else get_settings()


def cart_repository(settings: Settings | None = None) -> JsonCartRepository:
    s = _settings(settings)
    return JsonCartRepository(s.data_dir / "carts.json", currency=s.currency)


def product_catalog(settings: Settings | None = None) -> JsonProductCatalog:
    return JsonProductCatalog(_settings(settings).data_dir / "products.json")


def promo_code_repository(settings: Settings | None = None) -> JsonPromoCodeRepository:
    s = _settings(settings)
    return JsonPromoCodeRepository(
        s.data_dir / "promo_codes.json", s.data_dir / "promo_usages.json"
    )


def order_repository(settings: Settings | None = None) -> JsonOrderRepository:
    return JsonOrderRepository(_settings(settings).data_dir / "orders.json")


def unit_of_work(settings: Settings | None = None) -> JsonUnitOfWork:
    return JsonUnitOfWork(
        orders=order_repository(settings),
        promo_codes=promo_code_repository(settings),
    )


def tax_rate(settings: Settings | None = None) -> TaxRate:
    return TaxRate(_settings(settings).tax_rate)


def shipping_rates(settings: Settings | None = None) -> ShippingRates:
    s = _settings(settings)
    return ShippingRates(
        baltic=Money(s.baltic_rate, s.currency),
        international=Money(s.international_rate, s.currency),
        carrier=Money(s.carrier_rate, s.currency),
        free_shipping_threshold=Money(s.free_shipping_threshold, s.currency),
        free_shipping_country=s.free_shipping_country.upper(),
    )
