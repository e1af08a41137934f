"""CLI commands for promo codes."""

from __future__ import annotations

import click

from storefront.application.validate_promo_code import ValidatePromoCodeHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import promo_code_repository


@click.command("check")
@click.option("--code", required=True, help="Promo code as entered by the customer.")
@click.option("--total", required=True, help="Cart total (e.g. 100.00).")
@click.option("--user-id", type=int, default=None, help="Authenticated customer ID.")
@click.option("--email", default=None, help="Guest e-mail address.")
def promo_check(code: str, total: str, user_id: int | None, email: str | None) -> None:
    """Check whether a promo code applies and what it is worth."""
    handler = ValidatePromoCodeHandler(promo_repo=promo_code_repository())

    try:
        result = handler.handle(code=code, cart_total=total, user_id=user_id, email=email)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.valid:
        raise click.ClickException(f"{result.error} [{result.error_key}]")

    click.echo(f"{result.code}: {result.formatted_value} off")
    click.echo(f"Discount on this cart: €{result.discount_amount:.2f}")
