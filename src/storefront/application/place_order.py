"""Application service: Place Order use case.

The only mutating entry point of the pricing engine.  Steps:

1. Return the stored order if the idempotency key was already used for
   the same request and cart contents.
2. Recompute the full summary from the cart store and promo state;
   client-side totals are only compared, never trusted.  A submitted
   promo that fails its re-check is reported as PromoInvalidated.
3. Freeze the snapshot.
4. Inside one unit of work: re-check the idempotency key, record the
   promo use (re-checking its limits) and save the order.  Either both
   writes commit or neither does.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import structlog

from storefront.application.checkout_pricing import (
    PricedCheckout,
    price_checkout,
    validated_country,
)
from storefront.application.dto import PlaceOrderRequest
from storefront.domain.exceptions import (
    DomainException,
    OrderPlacementFailed,
    PriceMismatch,
    PromoAlreadyUsedByCustomer,
    PromoError,
    PromoInvalidated,
    PromoUsageLimitReached,
    ValidationError,
)
from storefront.domain.model.cart import CartLine
from storefront.domain.model.order import OrderSnapshot
from storefront.domain.model.promo_code import PromoUsage, normalize_code
from storefront.domain.model.shipping import ShippingRates
from storefront.domain.model.value_objects import Money, TaxRate
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_catalog import ProductCatalog
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.promo_evaluator import PromoCodeEvaluator
from storefront.domain.service.snapshot_builder import freeze, request_fingerprint

logger = structlog.get_logger(__name__)

DEFAULT_PRICE_TOLERANCE = Decimal("0.01")


class PlaceOrderHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog: ProductCatalog,
        uow: UnitOfWork,
        tax_rate: TaxRate,
        rates: ShippingRates,
        price_tolerance: Decimal = DEFAULT_PRICE_TOLERANCE,
    ) -> None:
        self._cart_repo = cart_repo
        self._catalog = catalog
        self._uow = uow
        self._evaluator = PromoCodeEvaluator(uow.promo_codes)
        self._tax_rate = tax_rate
        self._rates = rates
        self._price_tolerance = price_tolerance

    def handle(self, request: PlaceOrderRequest, now: datetime | None = None) -> OrderSnapshot:
        key = (request.idempotency_key or "").strip()
        if not key:
            raise ValidationError("Idempotency key is required")
        country = validated_country(request.country_code)
        lines = self._cart_repo.get_lines(request.cart_id)
        fingerprint = self._fingerprint(request, country, lines)
        now = now or datetime.now(timezone.utc)

        existing = self._replay(key, fingerprint)
        if existing is not None:
            return existing

        priced = self._price(request, country, lines, now)
        summary = priced.summary
        if request.client_total is not None:
            self._check_client_total(Money.of(request.client_total), summary.total)

        promo = priced.promo.promo_code if priced.promo else None
        snapshot = freeze(
            summary,
            lines,
            priced.shipping_method,
            promo,
            catalog=self._catalog,
            cart_id=request.cart_id,
            country_code=country,
            idempotency_key=key,
            fingerprint=fingerprint,
            created_at=now,
            user_id=request.user_id,
            email=request.email,
        )
        return self._persist(snapshot)

    # --- Internal helpers -----------------------------------------------------

    def _price(
        self,
        request: PlaceOrderRequest,
        country: str,
        lines: list[CartLine],
        now: datetime,
    ) -> PricedCheckout:
        try:
            return price_checkout(
                lines,
                country,
                request.shipping_method_id,
                request.promo_code,
                evaluator=self._evaluator,
                tax_rate=self._tax_rate,
                rates=self._rates,
                now=now,
                user_id=request.user_id,
                email=request.email,
            )
        except (PromoUsageLimitReached, PromoAlreadyUsedByCustomer):
            # contention for the code itself, reported as such
            raise
        except PromoError as exc:
            code = normalize_code(request.promo_code or "")
            raise PromoInvalidated(
                f"Promo code '{code}' no longer applies to this order: {exc}",
                reason_key=exc.key,
            ) from exc

    def _persist(self, snapshot: OrderSnapshot) -> OrderSnapshot:
        try:
            with self._uow:
                existing = self._replay(snapshot.idempotency_key, snapshot.request_fingerprint)
                if existing is not None:
                    return existing

                order_id = self._uow.orders.next_id()
                if snapshot.promo_code is not None:
                    self._uow.promo_codes.increment_usage(
                        PromoUsage(
                            code=snapshot.promo_code,
                            order_id=order_id,
                            user_id=snapshot.user_id,
                            email=snapshot.email,
                            discount_amount=snapshot.summary.promo_discount,
                        )
                    )
                saved_id = self._uow.orders.save(replace(snapshot, id=order_id))
                self._uow.commit()
        except DomainException:
            raise
        except Exception as exc:
            logger.exception(
                "order_placement_failed", idempotency_key=snapshot.idempotency_key
            )
            raise OrderPlacementFailed(
                "Order could not be placed; retry with the same idempotency key"
            ) from exc

        logger.info(
            "order_placed",
            order_id=saved_id,
            total=str(snapshot.total),
            promo_code=snapshot.promo_code,
            country=snapshot.country_code,
        )
        return replace(snapshot, id=saved_id)

    def _replay(self, key: str, fingerprint: str) -> OrderSnapshot | None:
        existing = self._uow.orders.get_by_idempotency_key(key)
        if existing is None:
            return None
        if existing.request_fingerprint != fingerprint:
            raise ValidationError(
                f"Idempotency key '{key}' was already used for a different checkout"
            )
        logger.info("order_replayed", order_id=existing.id, idempotency_key=key)
        return existing

    def _check_client_total(self, client_total: Money, server_total: Money) -> None:
        if abs(client_total.amount - server_total.amount) > self._price_tolerance:
            logger.warning(
                "price_mismatch",
                client_total=str(client_total),
                server_total=str(server_total),
            )
            raise PriceMismatch(client_total, server_total)

    @staticmethod
    def _fingerprint(request: PlaceOrderRequest, country: str, lines: list[CartLine]) -> str:
        return request_fingerprint(
            request.cart_id,
            country,
            request.shipping_method_id,
            normalize_code(request.promo_code) if request.promo_code else None,
            request.user_id,
            (request.email or "").lower() or None,
            *(
                f"{line.product_id}:{line.variant_id}:{line.quantity.value}:"
                f"{line.unit_price.amount}:{line.original_unit_price.amount}"
                for line in lines
            ),
        )
