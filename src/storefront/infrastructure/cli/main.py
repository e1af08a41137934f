import click

from storefront.infrastructure.cli.checkout_commands import checkout_place, checkout_preview
from storefront.infrastructure.cli.order_commands import order_show
from storefront.infrastructure.cli.promo_commands import promo_check
from storefront.infrastructure.cli.shipping_commands import shipping_methods
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug events.")
def cli(verbose: bool) -> None:
    """Storefront: checkout pricing and order placement"""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, json=settings.log_json)


@cli.group()
def checkout() -> None:
    """Preview and place checkouts."""


@cli.group()
def order() -> None:
    """Inspect placed orders."""


@cli.group()
def promo() -> None:
    """Check promo codes."""


@cli.group()
def shipping() -> None:
    """Inspect shipping options."""


# Register subcommands
checkout.add_command(checkout_place)
checkout.add_command(checkout_preview)
order.add_command(order_show)
promo.add_command(promo_check)
shipping.add_command(shipping_methods)
