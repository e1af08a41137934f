"""Integration tests for the PlaceOrder and ShowOrder use cases."""

import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.application.dto import PlaceOrderRequest
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.preview_summary import PreviewSummaryHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    OrderPlacementFailed,
    PriceMismatch,
    PromoBelowMinimum,
    PromoError,
    PromoInvalidated,
    PromoUsageLimitReached,
    ShippingUnavailable,
    ValidationError,
)
from storefront.domain.model.cart import CartLine, ProductInfo
from storefront.domain.model.promo_code import PromoCode, PromoType
from storefront.domain.model.shipping import ShippingRates
from storefront.domain.model.value_objects import Money, Quantity, TaxRate
from tests.fakes import (
    FakeCartRepository,
    FakeOrderRepository,
    FakeProductCatalog,
    FakePromoCodeRepository,
    FakeUnitOfWork,
)

NOW = datetime(2026, 6, 1, 10, 0, tzinfo=timezone.utc)


def _line(price: str, qty: int, pid: str = "1", original: str | None = None) -> CartLine:
    return CartLine(
        product_id=pid,
        variant_id=f"{pid}-M",
        quantity=Quantity(qty),
        unit_price=Money.of(price),
        original_unit_price=Money.of(original or price),
    )


def _setup(*promos: PromoCode):
    carts = FakeCartRepository({"c45": [_line("15.00", 3)]})
    catalog = FakeProductCatalog(
        {
            ("1", "1-M"): ProductInfo(name="Linen shirt", sku="LS-M"),
            ("2", "2-M"): ProductInfo(name="Wool scarf", sku="WS-M"),
        }
    )
    uow = FakeUnitOfWork(FakeOrderRepository(), FakePromoCodeRepository(list(promos)))
    handler = PlaceOrderHandler(
        cart_repo=carts,
        catalog=catalog,
        uow=uow,
        tax_rate=TaxRate.of("0.21"),
        rates=ShippingRates(),
    )
    return handler, carts, catalog, uow


def _request(key: str = "key-1", **overrides) -> PlaceOrderRequest:
    fields = dict(
        cart_id="c45",
        country_code="LT",
        shipping_method_id="venipak-courier",
        idempotency_key=key,
    )
    fields.update(overrides)
    return PlaceOrderRequest(**fields)


SAVE10 = PromoCode(code="SAVE10", type=PromoType.PERCENTAGE, value=Decimal("10"))


class TestPlaceOrderHappyPath:

    def test_places_order_with_server_side_totals(self):
        handler, _, _, uow = _setup()
        snapshot = handler.handle(_request(), now=NOW)

        assert snapshot.id == 1
        assert snapshot.total == Money.of("49.00")
        assert snapshot.shipping_method.id == "venipak-courier"
        assert snapshot.lines[0].product_name == "Linen shirt"
        assert uow.orders.get_by_id(1) == snapshot
        assert uow.committed == 1

    def test_promo_applied_and_usage_recorded(self):
        handler, _, _, uow = _setup(SAVE10)
        snapshot = handler.handle(
            _request(promo_code="save10", email="ann@example.com"), now=NOW
        )

        assert snapshot.summary.promo_discount == Money.of("4.50")
        assert snapshot.total == Money.of("44.50")
        assert snapshot.promo_code == "SAVE10"
        assert uow.promo_codes.get_by_code("SAVE10").times_used == 1
        usage = uow.promo_codes.list_usages("SAVE10")[0]
        assert usage.order_id == snapshot.id
        assert usage.email == "ann@example.com"
        assert usage.discount_amount == Money.of("4.50")

    def test_client_total_within_tolerance_accepted(self):
        handler, _, _, _ = _setup()
        snapshot = handler.handle(_request(client_total=Decimal("49.01")), now=NOW)
        assert snapshot.total == Money.of("49.00")

    def test_price_locked_after_cart_changes(self):
        handler, carts, catalog, uow = _setup()
        snapshot = handler.handle(_request(), now=NOW)

        carts.put("c45", [_line("99.00", 1)])
        catalog.put("1", "1-M", ProductInfo(name="Renamed", sku="X"))

        dto = ShowOrderHandler(uow.orders).handle(snapshot.id)
        assert dto.items[0].product_name == "Linen shirt"
        assert dto.items[0].unit_price == "€15.00"
        assert dto.summary.total == "€49.00"


class TestIdempotency:

    def test_same_key_returns_same_order_without_second_use(self):
        handler, _, _, uow = _setup(SAVE10)
        first = handler.handle(_request(promo_code="SAVE10"), now=NOW)
        second = handler.handle(_request(promo_code="SAVE10"), now=NOW)

        assert second.id == first.id
        assert uow.orders.count() == 1
        assert uow.promo_codes.get_by_code("SAVE10").times_used == 1

    def test_same_key_different_checkout_rejected(self):
        handler, _, _, _ = _setup()
        handler.handle(_request(), now=NOW)
        with pytest.raises(ValidationError, match="already used for a different checkout"):
            handler.handle(_request(country_code="LV"), now=NOW)

    def test_different_keys_create_different_orders(self):
        handler, _, _, uow = _setup()
        a = handler.handle(_request("a"), now=NOW)
        b = handler.handle(_request("b"), now=NOW)
        assert a.id != b.id
        assert uow.orders.count() == 2

    def test_same_key_after_cart_change_rejected(self):
        handler, carts, _, uow = _setup()
        handler.handle(_request(), now=NOW)
        carts.put("c45", [_line("15.00", 4)])
        with pytest.raises(ValidationError, match="already used for a different checkout"):
            handler.handle(_request(), now=NOW)
        assert uow.orders.count() == 1

    def test_blank_key_rejected(self):
        handler, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="Idempotency key"):
            handler.handle(_request("  "), now=NOW)

    def test_concurrent_retries_of_one_submission_create_one_order(self):
        handler, _, _, uow = _setup()
        results, barrier = [], threading.Barrier(4)

        def submit():
            barrier.wait()
            results.append(handler.handle(_request("same"), now=NOW))

        threads = [threading.Thread(target=submit) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert {r.id for r in results} == {1}
        assert uow.orders.count() == 1


class TestPromoRace:

    def test_two_checkouts_against_single_use_promo(self):
        once = PromoCode(code="ONCE", type=PromoType.FIXED, value=Decimal("5"), max_uses=1)
        handler, _, _, uow = _setup(once)
        outcomes: list[object] = []
        barrier = threading.Barrier(2)

        def submit(key: str):
            barrier.wait()
            try:
                outcomes.append(handler.handle(_request(key, promo_code="ONCE"), now=NOW))
            except PromoError as exc:
                outcomes.append(exc)

        threads = [threading.Thread(target=submit, args=(k,)) for k in ("a", "b")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        errors = [o for o in outcomes if isinstance(o, Exception)]
        orders = [o for o in outcomes if not isinstance(o, Exception)]
        assert len(orders) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], PromoUsageLimitReached)
        assert uow.promo_codes.get_by_code("ONCE").times_used == 1
        assert uow.orders.count() == 1


class TestPlaceOrderRejections:

    def test_price_mismatch(self):
        handler, _, _, uow = _setup()
        with pytest.raises(PriceMismatch) as exc_info:
            handler.handle(_request(client_total=Decimal("45.00")), now=NOW)
        assert exc_info.value.server_total == Money.of("49.00")
        assert uow.orders.count() == 0

    def test_promo_below_minimum_after_sale_price(self):
        big = PromoCode(
            code="BIG", type=PromoType.FIXED, value=Decimal("5"), min_cart_total=Money.of("40")
        )
        handler, carts, _, uow = _setup(big)
        carts.put("c45", [_line("12.00", 3, original="15.00")])
        with pytest.raises(PromoInvalidated, match="no longer applies"):
            handler.handle(_request(promo_code="BIG"), now=NOW)
        assert uow.promo_codes.get_by_code("BIG").times_used == 0

    def test_unsupported_destination(self):
        handler, _, _, _ = _setup()
        with pytest.raises(ShippingUnavailable):
            handler.handle(_request(country_code="JP", shipping_method_id="fedex-courier"), now=NOW)

    def test_unknown_product_in_catalog(self):
        handler, carts, _, _ = _setup()
        carts.put("c45", [_line("15.00", 3, pid="9")])
        with pytest.raises(EntityNotFoundError):
            handler.handle(_request(), now=NOW)

    def test_persistence_failure_rolls_back_promo_usage(self):
        handler, _, _, uow = _setup(SAVE10)
        uow.orders.fail_on_save = True

        with pytest.raises(OrderPlacementFailed):
            handler.handle(_request(promo_code="SAVE10"), now=NOW)

        assert uow.promo_codes.get_by_code("SAVE10").times_used == 0
        assert uow.promo_codes.list_usages("SAVE10") == []
        assert uow.orders.count() == 0

        # retry with the same key succeeds once storage recovers
        uow.orders.fail_on_save = False
        snapshot = handler.handle(_request(promo_code="SAVE10"), now=NOW)
        assert snapshot.id == 1
        assert uow.promo_codes.get_by_code("SAVE10").times_used == 1


class TestShowOrder:

    def test_unknown_order(self):
        _, _, _, uow = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            ShowOrderHandler(uow.orders).handle(999)

    def test_promo_shown_with_value(self):
        handler, _, _, uow = _setup(SAVE10)
        snapshot = handler.handle(_request(promo_code="SAVE10"), now=NOW)
        dto = ShowOrderHandler(uow.orders).handle(snapshot.id)
        assert dto.promo_code == "SAVE10 (10%)"
        assert dto.summary.promo_discount == "€4.50"
        assert dto.created_at == "2026-06-01 10:00 UTC"


class TestPromoInvalidatedAtPlacement:

    BIG = PromoCode(
        code="BIG", type=PromoType.FIXED, value=Decimal("5"), min_cart_total=Money.of("40")
    )

    def test_cart_shrinks_below_minimum_after_preview(self):
        handler, carts, _, uow = _setup(self.BIG)
        preview = PreviewSummaryHandler(carts, uow.promo_codes, TaxRate.of("0.21"), ShippingRates())
        assert preview.handle("c45", "LT", promo_code="BIG", now=NOW).promo_discount == Money.of("5.00")

        carts.put("c45", [_line("12.00", 3, original="15.00")])

        with pytest.raises(PromoInvalidated) as exc_info:
            handler.handle(_request(promo_code="BIG"), now=NOW)
        assert exc_info.value.reason_key == "promo_code.minimum_not_met"
        assert isinstance(exc_info.value.__cause__, PromoBelowMinimum)
        assert uow.promo_codes.get_by_code("BIG").times_used == 0
        assert uow.orders.count() == 0

    def test_code_expires_between_preview_and_placement(self):
        summer = PromoCode(
            code="SUMMER",
            type=PromoType.PERCENTAGE,
            value=Decimal("20"),
            expires_at=NOW + timedelta(minutes=5),
        )
        handler, carts, _, uow = _setup(summer)
        preview = PreviewSummaryHandler(carts, uow.promo_codes, TaxRate.of("0.21"), ShippingRates())
        assert preview.handle("c45", "LT", promo_code="SUMMER", now=NOW).promo_discount == Money.of("9.00")

        with pytest.raises(PromoInvalidated) as exc_info:
            handler.handle(_request(promo_code="SUMMER"), now=NOW + timedelta(minutes=10))
        assert exc_info.value.reason_key == "promo_code.expired"

    def test_usage_limit_still_reported_as_such(self):
        spent = PromoCode(
            code="ONCE", type=PromoType.FIXED, value=Decimal("5"), max_uses=1, times_used=1
        )
        handler, _, _, _ = _setup(spent)
        with pytest.raises(PromoUsageLimitReached):
            handler.handle(_request(promo_code="ONCE"), now=NOW)
