"""Domain service: the order status state machine.

Pure functions over a static transition table. Every status decision in
the application goes through here; nothing else compares statuses to
decide what is allowed.

    PENDING ──> IN_PREPARATION ──> READY ──> COMPLETED
       │               │
       └───────────────┴──> CANCELED
"""

from __future__ import annotations

from types import MappingProxyType

from pizzeria.domain.exceptions import InvalidOrderStatusError
from pizzeria.domain.model.order_status import OrderStatus

_TRANSITIONS = MappingProxyType({
    OrderStatus.PENDING: frozenset({OrderStatus.IN_PREPARATION, OrderStatus.CANCELED}),
    OrderStatus.IN_PREPARATION: frozenset({OrderStatus.READY, OrderStatus.CANCELED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
})


def allowed_transitions(current: OrderStatus) -> frozenset[OrderStatus]:
    """Statuses reachable from *current* in one step (empty when terminal)."""
    return _TRANSITIONS.get(current, frozenset())


def is_terminal(status: OrderStatus) -> bool:
    return not allowed_transitions(status)


def validate_transition(current: OrderStatus | None, target: OrderStatus | None) -> None:
    """Raise InvalidOrderStatusError unless *current* -> *target* is allowed.

    Re-applying the current status is always accepted as a no-op.
    """
    if not isinstance(current, OrderStatus) or not isinstance(target, OrderStatus):
        raise InvalidOrderStatusError(
            f"Current and target status must both be defined "
            f"(got {current!r} -> {target!r})"
        )

    if current is target:
        return

    if is_terminal(current):
        raise InvalidOrderStatusError(
            f"Invalid status transition from {current.value} to {target.value}. "
            f"{current.value} is a final status"
        )

    allowed = allowed_transitions(current)
    if target not in allowed:
        names = ", ".join(sorted(s.value for s in allowed))
        raise InvalidOrderStatusError(
            f"Invalid status transition from {current.value} to {target.value}. "
            f"Allowed transitions: {names}"
        )


def can_be_modified_by_customer(status: OrderStatus) -> bool:
    return status is OrderStatus.PENDING


def can_be_taken_by_preparer(status: OrderStatus) -> bool:
    return status is OrderStatus.PENDING
