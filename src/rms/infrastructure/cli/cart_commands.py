"""CLI commands for the cart and checkout."""

from __future__ import annotations

import click

from rms.application.add_to_cart import (
    AddToCartHandler,
    ClearCartHandler,
    RemoveFromCartHandler,
    ShowCartHandler,
    UpdateCartItemHandler,
)
from rms.application.checkout import CheckoutHandler
from rms.application.dto import CartDTO, RentalItemSpec
from rms.domain.exceptions import DomainException
from rms.infrastructure.bootstrap import (
    cart_repository,
    conflict_retries,
    order_repository,
    product_repository,
    reservation_repository,
)
from rms.infrastructure.cli.options import parse_date, period_options


def _display_cart(dto: CartDTO) -> None:
    click.echo(f"Cart of {dto.customer_name}  ({dto.item_count} unit(s))")
    if not dto.items:
        click.echo("  (empty)")
        return
    click.echo(f"  {'Product':<20} {'Variant':<8} {'Qty':>4} {'From':<11} {'Until':<11} {'Days':>4}")
    click.echo(f"  {'-'*63}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.variant_id or '-':<8} {item.quantity:>4} "
            f"{item.start:<11} {item.end:<11} {item.days:>4}"
        )


@click.command("add")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@click.option("--quantity", default=1, show_default=True, type=int)
@period_options
def cart_add(
    customer: str,
    product_id: str,
    variant_id: str | None,
    quantity: int,
    start: str,
    end: str,
) -> None:
    """Add a rental to the customer's cart (checks availability)."""
    handler = AddToCartHandler(
        cart_repo=cart_repository(),
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
        dto = handler.handle(customer, spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("show")
@click.option("--customer", required=True, help="Customer name.")
def cart_show(customer: str) -> None:
    """Show the customer's cart."""
    _display_cart(ShowCartHandler(cart_repo=cart_repository()).handle(customer))


@click.command("update")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@click.option("--quantity", required=True, type=int, help="New number of units.")
@period_options
def cart_update(
    customer: str,
    product_id: str,
    variant_id: str | None,
    quantity: int,
    start: str,
    end: str,
) -> None:
    """Change the quantity of a cart line (checks availability)."""
    handler = UpdateCartItemHandler(
        cart_repo=cart_repository(),
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
        dto = handler.handle(customer, spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("remove")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@period_options
def cart_remove(customer: str, product_id: str, variant_id: str | None, start: str, end: str) -> None:
    """Remove a line from the customer's cart."""
    handler = RemoveFromCartHandler(cart_repo=cart_repository())

    try:
        dto = handler.handle(customer, product_id, parse_date(start), parse_date(end), variant_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("clear")
@click.option("--customer", required=True, help="Customer name.")
def cart_clear(customer: str) -> None:
    """Empty the customer's cart."""
    ClearCartHandler(cart_repo=cart_repository()).handle(customer)
    click.echo(f"Cart of {customer} cleared.")


@click.command("checkout")
@click.option("--customer", required=True, help="Customer name.")
def checkout(customer: str) -> None:
    """Turn the cart into a confirmed order (reserves units)."""
    handler = CheckoutHandler(
        cart_repo=cart_repository(),
        order_repo=order_repository(),
        product_repo=product_repository(),
        reservation_repo=reservation_repository(),
        conflict_retries=conflict_retries(),
    )

    try:
        dto = handler.handle(customer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} {dto.status.lower()}, {len(dto.items)} line(s) reserved.")
