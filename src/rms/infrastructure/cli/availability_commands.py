"""CLI commands for availability queries."""

from __future__ import annotations

import click

from rms.application.check_availability import CheckAvailabilityHandler
from rms.application.dto import RentalItemSpec
from rms.application.show_availability import ShowAvailabilityCalendarHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure.bootstrap import product_repository, reservation_repository
from rms.infrastructure.cli.options import parse_date, period_options


@click.command("check")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units wanted.")
@period_options
def availability_check(
    product_id: str, variant_id: str | None, quantity: int, start: str, end: str
) -> None:
    """Check whether units can be rented for a period."""
    handler = CheckAvailabilityHandler(
        product_repo=product_repository(),
        reservation_repo=reservation_repository(),
    )
    spec = RentalItemSpec(
        product_id=product_id,
        quantity=quantity,
        start=parse_date(start),
        end=parse_date(end),
        variant_id=variant_id,
    )

    try:
        dto = handler.handle(spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.available:
        click.echo(f"Available: {dto.available_quantity} of {dto.total_quantity} unit(s) free")
    else:
        click.echo(f"Not available: {dto.message}")


@click.command("calendar")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--year", required=True, type=int)
@click.option("--month", required=True, type=click.IntRange(1, 12))
def availability_calendar(product_id: str, year: int, month: int) -> None:
    """Show free units for each day of a month."""
    handler = ShowAvailabilityCalendarHandler(
        product_repo=product_repository(),
        reservation_repo=reservation_repository(),
    )

    try:
        days = handler.handle(product_id, year, month)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Date':<12} {'Free':>5}")
    click.echo("-" * 18)
    for d in days:
        click.echo(f"{d.day:<12} {d.available_quantity:>5}")
