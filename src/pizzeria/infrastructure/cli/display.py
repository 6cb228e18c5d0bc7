"""Plain-text rendering of orders for the terminal."""

from __future__ import annotations

import click

from pizzeria.application.dto import OrderDTO


def display_order(dto: OrderDTO) -> None:
    click.echo(f"Order {dto.code}  (status={dto.status}, version={dto.version})")
    click.echo(f"Customer: {dto.customer_name}  {dto.phone}")
    click.echo(f"Deliver:  {dto.delivery_address}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Pizza':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.pizza_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


def display_order_table(dtos: list[OrderDTO], empty_message: str) -> None:
    if not dtos:
        click.echo(empty_message)
        return

    click.echo(f"{'Code':<14} {'Status':<16} {'Customer':<20} {'Total':>10} {'Created':>24}")
    click.echo("-" * 88)
    for dto in dtos:
        click.echo(
            f"{dto.code:<14} {dto.status:<16} {dto.customer_name:<20} "
            f"{dto.total:>10} {dto.created_at:>24}"
        )
