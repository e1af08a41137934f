"""Shared table formatting for CLI output."""

from __future__ import annotations

import click

from storefront.application.dto import PriceSummaryDTO


def echo_summary(summary: PriceSummaryDTO) -> None:
    rows = [
        ("Original subtotal", summary.original_subtotal),
        ("Product discount", f"-{summary.product_discount}"),
        ("Subtotal", summary.subtotal),
        ("  excl. tax", summary.subtotal_excl_tax),
        ("  tax", summary.tax_amount),
        ("Shipping", summary.shipping_cost),
        ("Promo discount", f"-{summary.promo_discount}"),
    ]
    for label, value in rows:
        click.echo(f"  {label:<27} {value:>20}")
    click.echo(f"  {'-'*48}")
    click.echo(f"  {'Order Total':<27} {summary.total:>20}")
