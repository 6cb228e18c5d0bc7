"""CLI commands for the preparer working the oven."""

from __future__ import annotations

import click

from pizzeria.application.dto import to_dto
from pizzeria.domain.model.order import OrderStatus
from pizzeria.infrastructure.bootstrap import workflow_engine
from pizzeria.infrastructure.cli.display import display_order, display_order_table
from pizzeria.infrastructure.cli.errors import (
    PREPARER_OUTCOMES,
    TAKE_NEXT_OUTCOMES,
    reported_as,
)


@click.command("list")
def order_list() -> None:
    """List every order, oldest first."""
    orders = workflow_engine().get_all_orders()
    display_order_table([to_dto(o) for o in orders], "No orders found.")


@click.command("pending")
def order_pending() -> None:
    """List pending orders, oldest first."""
    orders = workflow_engine().get_all_pending_orders()
    display_order_table([to_dto(o) for o in orders], "No pending orders.")


@click.command("take")
@click.option("--code", required=True, help="Order code to take.")
def order_take(code: str) -> None:
    """Start preparing a specific pending order."""
    with reported_as(PREPARER_OUTCOMES):
        order = workflow_engine().take_order(code)

    click.echo(f"Order {order.code} is now IN_PREPARATION.")
    display_order(to_dto(order))


@click.command("take-next")
def order_take_next() -> None:
    """Start preparing the oldest pending order."""
    with reported_as(TAKE_NEXT_OUTCOMES):
        order = workflow_engine().take_next_order()

    click.echo(f"Order {order.code} is now IN_PREPARATION.")
    display_order(to_dto(order))


@click.command("status")
@click.option("--code", required=True, help="Order code.")
@click.option(
    "--status",
    "new_status",
    required=True,
    help=f"Target status ({', '.join(s.value for s in OrderStatus)}).",
)
@click.option("--expected-version", type=int, default=None, help="Version you last saw.")
def order_status(code: str, new_status: str, expected_version: int | None) -> None:
    """Move an order to a new status."""
    with reported_as(PREPARER_OUTCOMES):
        order = workflow_engine().update_status(
            code, new_status, expected_version=expected_version
        )

    click.echo(f"Order {order.code} status is now {order.status.value}.")
