import click

from checkout.infrastructure.bootstrap import settings
from checkout.infrastructure.cli.catalog_commands import (
    catalog_add,
    catalog_list,
    catalog_restore,
)
from checkout.infrastructure.cli.order_commands import (
    order_invoice,
    order_list,
    order_place,
    order_show,
)
from checkout.infrastructure.cli.user_commands import user_add
from checkout.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """Gallery Checkout: catalog orders and invoices."""
    configure_logging(settings().log_level, settings().log_file)


@cli.group()
def order() -> None:
    """Place and inspect orders."""


@cli.group()
def catalog() -> None:
    """Manage catalog items."""


@cli.group()
def user() -> None:
    """Manage users."""


# Register subcommands
order.add_command(order_invoice)
order.add_command(order_list)
order.add_command(order_place)
order.add_command(order_show)
catalog.add_command(catalog_add)
catalog.add_command(catalog_list)
catalog.add_command(catalog_restore)
user.add_command(user_add)
