"""CLI commands for shipping options."""

from __future__ import annotations

import click

from storefront.application.list_shipping_methods import ListShippingMethodsHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import shipping_rates


@click.command("methods")
@click.option("--country", required=True, help="ISO country code, e.g. LT.")
@click.option("--subtotal", default="0", show_default=True, help="Cart subtotal (e.g. 45.00).")
def shipping_methods(country: str, subtotal: str) -> None:
    """List shipping methods available for a destination."""
    handler = ListShippingMethodsHandler(rates=shipping_rates())

    try:
        methods = handler.handle(country_code=country, subtotal=subtotal)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not methods:
        click.echo(f"No shipping available to {country.upper()}.")
        return

    click.echo(f"{'ID':<18} {'Name':<22} {'Price':>8}  {'Estimate'}")
    click.echo("-" * 70)
    for m in methods:
        click.echo(f"{m.id:<18} {m.name:<22} {m.price:>8}  {m.estimated_days}")
