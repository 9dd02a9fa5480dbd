import click

from rms.infrastructure.cli.availability_commands import (
    availability_calendar,
    availability_check,
)
from rms.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
    checkout,
)
from rms.infrastructure.cli.order_commands import order_cancel, order_show, order_quotation
from rms.infrastructure.cli.product_commands import product_add, product_list, product_set_stock
from rms.infrastructure.cli.reservation_commands import reservation_list
from rms.infrastructure.config import get_settings
from rms.infrastructure.logging_config import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log engine activity to stderr.")
def cli(verbose: bool) -> None:
    """RMS: Rental Management System"""
    configure_logging("INFO" if verbose else get_settings().log_level)


@cli.group()
def product() -> None:
    """Manage rentable products."""


@cli.group()
def availability() -> None:
    """Query date-based availability."""


@cli.group()
def cart() -> None:
    """Manage a customer's cart."""


@cli.group()
def order() -> None:
    """Manage rental orders."""


@cli.group()
def reservation() -> None:
    """Inspect reservations."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_set_stock)
availability.add_command(availability_check)
availability.add_command(availability_calendar)
cart.add_command(cart_add)
cart.add_command(cart_show)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
cli.add_command(checkout)
order.add_command(order_show)
order.add_command(order_cancel)
order.add_command(order_quotation)
reservation.add_command(reservation_list)
