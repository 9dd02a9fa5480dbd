"""CLI commands for the RentalOrder aggregate."""

from __future__ import annotations

import click

from rms.application.cancel_order import CancelOrderHandler
from rms.application.dto import OrderDTO, ReservationDTO
from rms.application.place_quotation_order import PlaceQuotationOrderHandler
from rms.application.show_order import ShowOrderHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure.bootstrap import (
    conflict_retries,
    order_repository,
    product_repository,
    reservation_repository,
)
from rms.infrastructure.cli.options import parse_items


def _display_order(dto: OrderDTO, reservations: list[ReservationDTO]) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Units:    {dto.total_units}")
    if dto.quotation_id:
        click.echo(f"Quotation: {dto.quotation_id}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>4} {'From':<11} {'Until':<11} {'Days':>4} {'Source':<9}")
    click.echo(f"  {'-'*64}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>4} {item.start:<11} "
            f"{item.end:<11} {item.days:>4} {item.source:<9}"
        )

    if reservations:
        click.echo()
        click.echo("  Reservations:")
        for r in reservations:
            click.echo(f"    #{r.id} product {r.product_id} x{r.quantity} {r.start}..{r.end} {r.status}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order and its reservations."""
    handler = ShowOrderHandler(
        order_repo=order_repository(),
        reservation_repo=reservation_repository(),
    )

    try:
        dto, reservations = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto, reservations)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
def order_cancel(order_id: int) -> None:
    """Cancel an order (frees its reserved dates)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        reservation_repo=reservation_repository(),
    )

    try:
        released = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled, {released} reservation(s) released.")


@click.command("from-quotation")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--quotation", "quotation_id", required=True, help="Quotation reference.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty:Start:End,...'.")
def order_quotation(customer: str, quotation_id: str, items: str) -> None:
    """Place a confirmed order from an accepted quotation."""
    specs = parse_items(items)

    handler = PlaceQuotationOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        reservation_repo=reservation_repository(),
        conflict_retries=conflict_retries(),
    )

    try:
        dto = handler.handle(customer, quotation_id, specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} {dto.status.lower()} from quotation {quotation_id}.")
