"""CLI commands for customers: place, inspect, change and cancel orders."""

from __future__ import annotations

import click

from pizzeria.application.dto import UNSET, OrderItemSpec, OrderUpdate, to_dto
from pizzeria.domain.exceptions import ValidationError
from pizzeria.domain.model.value_objects import CustomerInfo
from pizzeria.infrastructure.bootstrap import workflow_engine
from pizzeria.infrastructure.cli.display import display_order
from pizzeria.infrastructure.cli.errors import CUSTOMER_OUTCOMES, reported_as


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'Margherita:2:7.50,Diavola:1:9.00' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if entry.count(":") < 2:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'Pizza:Quantity:UnitPrice'."
            )
        name, qty_str, price = entry.rsplit(":", 2)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for pizza '{name}'."
            )
        specs.append(OrderItemSpec(pizza_name=name.strip(), quantity=qty, unit_price=price.strip()))
    return specs


@click.command("create")
@click.option("--name", required=True, help="Customer name.")
@click.option("--phone", required=True, help="Phone number, e.g. +393331234567.")
@click.option("--address", required=True, help="Delivery address.")
@click.option("--items", required=True, help="Items as 'Pizza:Qty:Price,Pizza:Qty:Price'.")
def order_create(name: str, phone: str, address: str, items: str) -> None:
    """Place a new order."""
    specs = _parse_items(items)

    with reported_as(CUSTOMER_OUTCOMES):
        customer = CustomerInfo(name=name, phone=phone, delivery_address=address)
        order = workflow_engine().create_order(customer, specs)

    click.echo(f"Order {order.code} created  (status={order.status.value})")
    display_order(to_dto(order))


@click.command("show")
@click.option("--code", required=True, help="Order code, e.g. ORD-1A2B3C4D.")
def order_show(code: str) -> None:
    """Show an order."""
    order = workflow_engine().get_by_code(code)
    if order is None:
        raise click.ClickException(f"no such order: {code}")
    display_order(to_dto(order))


@click.command("update")
@click.option("--code", required=True, help="Order code.")
@click.option("--name", default=None, help="New customer name.")
@click.option("--phone", default=None, help="New phone number.")
@click.option("--address", default=None, help="New delivery address.")
@click.option("--items", "items_str", default=None, help="Replacement items as 'Pizza:Qty:Price,...'.")
@click.option("--expected-version", type=int, default=None, help="Version you last saw.")
def order_update(
    code: str,
    name: str | None,
    phone: str | None,
    address: str | None,
    items_str: str | None,
    expected_version: int | None,
) -> None:
    """Change a pending order. Only the options given are changed."""
    update = OrderUpdate(
        name=UNSET if name is None else name,
        phone=UNSET if phone is None else phone,
        delivery_address=UNSET if address is None else address,
        items=UNSET if items_str is None else _parse_items(items_str),
    )

    with reported_as(CUSTOMER_OUTCOMES):
        if update.is_empty:
            raise ValidationError("Nothing to update")
        order = workflow_engine().update_order(code, update, expected_version=expected_version)

    click.echo(f"Order {order.code} updated.")
    display_order(to_dto(order))


@click.command("cancel")
@click.option("--code", required=True, help="Order code.")
@click.option("--expected-version", type=int, default=None, help="Version you last saw.")
def order_cancel(code: str, expected_version: int | None) -> None:
    """Cancel a pending order."""
    with reported_as(CUSTOMER_OUTCOMES):
        order = workflow_engine().cancel_order(code, expected_version=expected_version)

    click.echo(f"Order {order.code} canceled.")
