"""CLI commands for inspecting reservations."""

from __future__ import annotations

import click

from rms.application.show_availability import ListReservationsHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure.bootstrap import product_repository, reservation_repository
from rms.infrastructure.cli.options import parse_date, period_options


@click.command("list")
@click.option("--product", "product_id", required=True, help="Product ID.")
@period_options
def reservation_list(product_id: str, start: str, end: str) -> None:
    """List active reservations of a product overlapping a period."""
    handler = ListReservationsHandler(
        product_repo=product_repository(),
        reservation_repo=reservation_repository(),
    )

    try:
        rows = handler.handle(product_id, parse_date(start), parse_date(end))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No active reservations in this period.")
        return

    click.echo(f"{'ID':<6} {'Order':<7} {'Variant':<8} {'Qty':>4} {'From':<11} {'Until':<11}")
    click.echo("-" * 52)
    for r in rows:
        click.echo(
            f"{r.id:<6} {r.order_id:<7} {r.variant_id or '-':<8} {r.quantity:>4} {r.start:<11} {r.end:<11}"
        )
