"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import timezone
from enum import Enum
from typing import Any, Union

from pizzeria.domain.model.order import Order


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


#: Marks an OrderUpdate field the caller did not send.
UNSET = _Unset.UNSET


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one pizza line as the customer asked for it."""

    pizza_name: str
    quantity: int
    unit_price: str  # decimal string, e.g. "7.50"


@dataclass(frozen=True)
class OrderUpdate:
    """Input: a partial update of a pending order.

    A field left at ``UNSET`` is not touched. Any other value, ``None``
    included, is applied; ``None`` therefore means "clear", which the
    domain rejects for the required customer fields. ``items`` replaces
    the whole list.
    """

    name: Union[str, None, _Unset] = UNSET
    phone: Union[str, None, _Unset] = UNSET
    delivery_address: Union[str, None, _Unset] = UNSET
    items: Union[list[OrderItemSpec], None, _Unset] = UNSET

    def present_fields(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    @property
    def is_empty(self) -> bool:
        return not self.present_fields()


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    pizza_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "€7.50"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    code: str
    status: str
    version: int
    customer_name: str
    phone: str
    delivery_address: str
    items: list[OrderLineItemDTO]
    total: str
    created_at: str


def to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        code=order.code,
        status=order.status.value,
        version=order.version,
        customer_name=order.customer.name,
        phone=order.customer.phone,
        delivery_address=order.customer.delivery_address,
        items=[
            OrderLineItemDTO(
                pizza_name=item.pizza_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total),
        created_at=order.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
    )
