"""CLI commands for checkout preview and order placement."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from storefront.application.dto import PlaceOrderRequest, PriceSummaryDTO
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.preview_summary import PreviewSummaryHandler
from storefront.domain.exceptions import DomainException, PromoInvalidated
from storefront.infrastructure.bootstrap import (
    cart_repository,
    product_catalog,
    promo_code_repository,
    shipping_rates,
    tax_rate,
    unit_of_work,
)
from storefront.infrastructure.cli.formatting import echo_summary
from storefront.infrastructure.config import get_settings


def _parse_total(raw: str | None) -> Decimal | None:
    if raw is None:
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid amount '{raw}'.")


@click.command("preview")
@click.option("--cart", "cart_id", required=True, help="Cart ID.")
@click.option("--country", required=True, help="Destination ISO country code.")
@click.option("--promo", "promo_code", default=None, help="Promo code to apply.")
@click.option("--method", "method_id", default=None, help="Shipping method ID.")
@click.option("--user-id", type=int, default=None, help="Authenticated customer ID.")
@click.option("--email", default=None, help="Customer e-mail address.")
def checkout_preview(
    cart_id: str,
    country: str,
    promo_code: str | None,
    method_id: str | None,
    user_id: int | None,
    email: str | None,
) -> None:
    """Price a cart without placing an order."""
    handler = PreviewSummaryHandler(
        cart_repo=cart_repository(),
        promo_repo=promo_code_repository(),
        tax_rate=tax_rate(),
        rates=shipping_rates(),
    )

    try:
        summary = handler.handle(
            cart_id=cart_id,
            country_code=country,
            promo_code=promo_code,
            shipping_method_id=method_id,
            user_id=user_id,
            email=email,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart {cart_id} to {country.upper()}")
    echo_summary(PriceSummaryDTO.from_summary(summary))


@click.command("place")
@click.option("--cart", "cart_id", required=True, help="Cart ID.")
@click.option("--country", required=True, help="Destination ISO country code.")
@click.option("--method", "method_id", required=True, help="Shipping method ID.")
@click.option("--key", "idempotency_key", required=True, help="Idempotency key of this submission.")
@click.option("--promo", "promo_code", default=None, help="Promo code to apply.")
@click.option("--user-id", type=int, default=None, help="Authenticated customer ID.")
@click.option("--email", default=None, help="Customer e-mail address.")
@click.option("--client-total", default=None, help="Total shown to the customer.")
def checkout_place(
    cart_id: str,
    country: str,
    method_id: str,
    idempotency_key: str,
    promo_code: str | None,
    user_id: int | None,
    email: str | None,
    client_total: str | None,
) -> None:
    """Place an order for a cart."""
    handler = PlaceOrderHandler(
        cart_repo=cart_repository(),
        catalog=product_catalog(),
        uow=unit_of_work(),
        tax_rate=tax_rate(),
        rates=shipping_rates(),
        price_tolerance=get_settings().price_tolerance,
    )
    request = PlaceOrderRequest(
        cart_id=cart_id,
        country_code=country,
        shipping_method_id=method_id,
        idempotency_key=idempotency_key,
        promo_code=promo_code,
        user_id=user_id,
        email=email,
        client_total=_parse_total(client_total),
    )

    try:
        snapshot = handler.handle(request)
    except PromoInvalidated as exc:
        raise click.ClickException(f"{exc} Remove the code or update the cart.")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{snapshot.id} placed  (total={snapshot.total})")
    click.echo(f"Shipping: {snapshot.shipping_method.name} ({snapshot.shipping_method.estimated_days})")
    if snapshot.promo_code:
        click.echo(f"Promo:    {snapshot.promo_code} ({snapshot.promo_formatted_value})")
