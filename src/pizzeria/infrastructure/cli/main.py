import click

from pizzeria.infrastructure.bootstrap import configure_logging
from pizzeria.infrastructure.cli.customer_commands import (
    order_cancel,
    order_create,
    order_show,
    order_update,
)
from pizzeria.infrastructure.cli.preparer_commands import (
    order_list,
    order_pending,
    order_status,
    order_take,
    order_take_next,
)


@click.group()
def cli() -> None:
    """Pizzeria — order workflow"""
    configure_logging()


@cli.group()
def customer() -> None:
    """Place and manage your orders."""


@cli.group()
def preparer() -> None:
    """Work through the order queue."""


# Register subcommands
customer.add_command(order_cancel)
customer.add_command(order_create)
customer.add_command(order_show)
customer.add_command(order_update)
preparer.add_command(order_list)
preparer.add_command(order_pending)
preparer.add_command(order_status)
preparer.add_command(order_take)
preparer.add_command(order_take_next)
