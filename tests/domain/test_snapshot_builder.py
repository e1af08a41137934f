"""Unit tests for freezing a priced checkout into an order snapshot."""

import dataclasses
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.cart import CartLine, ProductInfo
from storefront.domain.model.promo_code import DiscountOutcome, PromoCode, PromoType
from storefront.domain.model.value_objects import Money, Quantity, TaxRate
from storefront.domain.service.price_composer import compose
from storefront.domain.service.shipping_catalog import methods_for_country
from storefront.domain.service.snapshot_builder import freeze, request_fingerprint
from tests.fakes import FakeProductCatalog

CREATED = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _setup(promo: PromoCode | None = None):
    lines = [
        CartLine(
            product_id="1",
            variant_id="1-M",
            quantity=Quantity(2),
            unit_price=Money.of("20.00"),
            original_unit_price=Money.of("25.00"),
        )
    ]
    catalog = FakeProductCatalog(
        {("1", "1-M"): ProductInfo(name="Linen shirt", sku="LS-M", image_url="/img/ls.jpg")}
    )
    method = methods_for_country("LT", Money.of("40.00"))[0]
    outcome = DiscountOutcome(promo, Money.zero()) if promo else None
    summary = compose(lines, method, outcome, TaxRate.of("0.21"))
    return lines, catalog, method, summary


def _freeze(lines, catalog, method, summary, promo=None):
    return freeze(
        summary,
        lines,
        method,
        promo,
        catalog=catalog,
        cart_id="cart-1",
        country_code="LT",
        idempotency_key="key-1",
        fingerprint="fp",
        created_at=CREATED,
    )


class TestFreeze:

    def test_copies_display_data_and_prices(self):
        lines, catalog, method, summary = _setup()
        snapshot = _freeze(lines, catalog, method, summary)

        line = snapshot.lines[0]
        assert line.product_name == "Linen shirt"
        assert line.sku == "LS-M"
        assert line.image_url == "/img/ls.jpg"
        assert line.unit_price == Money.of("20.00")
        assert line.original_unit_price == Money.of("25.00")
        assert snapshot.total == Money.of("44.00")
        assert snapshot.id is None
        assert snapshot.item_count == 2

    def test_later_catalog_edits_do_not_leak_into_snapshot(self):
        lines, catalog, method, summary = _setup()
        snapshot = _freeze(lines, catalog, method, summary)

        catalog.put("1", "1-M", ProductInfo(name="Renamed", sku="NEW"))

        assert snapshot.lines[0].product_name == "Linen shirt"
        assert snapshot.lines[0].sku == "LS-M"

    def test_snapshot_is_immutable(self):
        lines, catalog, method, summary = _setup()
        snapshot = _freeze(lines, catalog, method, summary)
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.promo_code = "HACK"  # type: ignore[misc]

    def test_promo_kept_by_code_string(self):
        promo = PromoCode(code="SAVE10", type=PromoType.PERCENTAGE, value=Decimal("10"))
        lines, catalog, method, summary = _setup(promo)
        snapshot = _freeze(lines, catalog, method, summary, promo)
        assert snapshot.promo_code == "SAVE10"
        assert snapshot.promo_formatted_value == "10%"
        assert snapshot.summary.promo_discount == Money.of("4.00")

    def test_same_inputs_freeze_to_equal_snapshots(self):
        lines, catalog, method, summary = _setup()
        assert _freeze(lines, catalog, method, summary) == _freeze(lines, catalog, method, summary)

    def test_missing_product_rejected(self):
        lines, _, method, summary = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            _freeze(lines, FakeProductCatalog(), method, summary)

    def test_empty_cart_rejected(self):
        _, catalog, method, summary = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            _freeze([], catalog, method, summary)

    def test_summary_for_other_method_rejected(self):
        lines, catalog, _, summary = _setup()
        fedex = methods_for_country("DE", Money.of("40.00"))[0]
        with pytest.raises(ValidationError, match="shipping method"):
            _freeze(lines, catalog, fedex, summary)


class TestRequestFingerprint:

    def test_stable_and_sensitive(self):
        assert request_fingerprint("c1", "LT", None) == request_fingerprint("c1", "LT", None)
        assert request_fingerprint("c1", "LT") != request_fingerprint("c1", "LV")
        assert request_fingerprint("a", "bc") != request_fingerprint("ab", "c")
