"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from rms.application.add_product import AddProductHandler
from rms.application.set_stock import SetStockHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
@click.option("--variant", "variants", multiple=True, help="Variant name (repeatable).")
def product_add(name: str, quantity: int, variants: tuple[str, ...]) -> None:
    """Add a new rentable product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(name=name, quantity=quantity, variant_names=list(variants))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added with {product.quantity} unit(s)")
    for v in product.variants:
        click.echo(f"  variant {v.id}: {v.name}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Stock':>6}  Variants")
    click.echo("-" * 50)
    for p in products:
        variants = ", ".join(f"{v.id}={v.name}" for v in p.variants) or "-"
        click.echo(f"{p.id:<6} {p.name:<20} {p.quantity:>6}  {variants}")


@click.command("set-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
def product_set_stock(product_id: str, quantity: int) -> None:
    """Set the number of units of a product."""
    handler = SetStockHandler(product_repo=product_repository())

    try:
        handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} stock set to {quantity}")
