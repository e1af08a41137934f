"""CLI commands for placed orders."""

from __future__ import annotations

import click

from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import order_repository
from storefront.infrastructure.cli.formatting import echo_summary


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of a placed order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id}  ({dto.country_code}, {dto.shipping_method})")
    click.echo(f"Created:  {dto.created_at}")
    if dto.promo_code:
        click.echo(f"Promo:    {dto.promo_code}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*48}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*48}")
    echo_summary(dto.summary)
