"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items. Status changes
are validated against the transition table in
``pizzeria.domain.service.status_transitions``; everything else about
the order (customer details, items) is only editable while it is PENDING,
which the workflow engine checks before calling in here.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal

from pizzeria.domain.exceptions import ValidationError
from pizzeria.domain.model.order_status import OrderStatus
from pizzeria.domain.model.value_objects import (
    MAX_UNIT_PRICE,
    MIN_UNIT_PRICE,
    CustomerInfo,
    Money,
    Quantity,
)
from pizzeria.domain.service.status_transitions import validate_transition

__all__ = ["INITIAL_VERSION", "Order", "OrderLineItem", "OrderStatus"]

INITIAL_VERSION = 0


@dataclass(frozen=True)
class OrderLineItem:
    """One pizza line: name, how many, and the price per pizza."""

    pizza_name: str
    quantity: Quantity
    unit_price: Money

    def __post_init__(self) -> None:
        if not isinstance(self.pizza_name, str) or not 2 <= len(self.pizza_name.strip()) <= 100:
            raise ValidationError("Pizza name must be between 2 and 100 characters")
        if self.unit_price.amount < MIN_UNIT_PRICE:
            raise ValidationError(
                f"Unit price for {self.pizza_name} must be at least {MIN_UNIT_PRICE}"
            )
        if self.unit_price.amount > MAX_UNIT_PRICE:
            raise ValidationError(
                f"Unit price for {self.pizza_name} must be at most {MAX_UNIT_PRICE}"
            )

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for pizza orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.

    ``version`` belongs to the repository: it is bumped there on every
    successful save, never by the aggregate itself.
    """

    id: str
    code: str
    customer: CustomerInfo
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    version: int = INITIAL_VERSION
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        code: str,
        customer: CustomerInfo,
        items: list[OrderLineItem],
        created_at: datetime | None = None,
    ) -> Order:
        """Create a new PENDING order, enforcing all invariants."""
        if not code or not code.strip():
            raise ValidationError("Order code is required")
        _require_items(items)

        return Order(
            id=uuid.uuid4().hex,
            code=code,
            customer=customer,
            items=list(items),
            status=OrderStatus.PENDING,
            version=INITIAL_VERSION,
            created_at=created_at or datetime.now(timezone.utc),
        )

    # --- Mutations ------------------------------------------------------------

    def replace_items(self, items: list[OrderLineItem]) -> None:
        """Swap the whole item list; partial item edits are not supported."""
        _require_items(items)
        self.items = list(items)

    def change_customer(self, **changes: str | None) -> None:
        """Change the given customer fields (``name``, ``phone``,
        ``delivery_address``), keeping the rest.

        Builds a new CustomerInfo so a bad value (including ``None``)
        leaves the order untouched.
        """
        unknown = set(changes) - {"name", "phone", "delivery_address"}
        if unknown:
            raise ValidationError(f"Unknown customer field(s): {', '.join(sorted(unknown))}")
        self.customer = replace(self.customer, **changes)

    def transition_to(self, target: OrderStatus) -> None:
        validate_transition(self.status, target)
        self.status = target

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money(Decimal("0.00"))
        for item in self.items:
            result = result + item.line_total
        return result


def _require_items(items: list[OrderLineItem]) -> None:
    if not items:
        raise ValidationError("Order must contain at least one item")
