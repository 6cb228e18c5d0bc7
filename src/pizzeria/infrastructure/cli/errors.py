"""Translate domain failures into the messages each audience sees.

Outcome tables are checked in order, so subclasses must come before
their base classes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from pizzeria.domain.exceptions import (
    ConcurrencyConflictError,
    DomainException,
    InvalidOrderStatusError,
    OrderModificationNotAllowedError,
    OrderNotFoundError,
    PreparationSlotTakenError,
    ValidationError,
)

_RETRY = "rejected, retry: order changed concurrently"

CUSTOMER_OUTCOMES: dict[type[DomainException], str] = {
    OrderNotFoundError: "no such order",
    OrderModificationNotAllowedError: "request rejected, order not editable",
    ValidationError: "request rejected, malformed input",
    ConcurrencyConflictError: _RETRY,
}

PREPARER_OUTCOMES: dict[type[DomainException], str] = {
    OrderNotFoundError: "no such order",
    PreparationSlotTakenError: "rejected, another order is active",
    OrderModificationNotAllowedError: "rejected, wrong status",
    InvalidOrderStatusError: "rejected, bad status value",
    ConcurrencyConflictError: _RETRY,
}

TAKE_NEXT_OUTCOMES: dict[type[DomainException], str] = {
    **PREPARER_OUTCOMES,
    OrderNotFoundError: "nothing to take",
}


def outcome_for(exc: DomainException, outcomes: dict[type[DomainException], str]) -> str:
    for exc_type, outcome in outcomes.items():
        if isinstance(exc, exc_type):
            return outcome
    return "rejected"


@contextmanager
def reported_as(outcomes: dict[type[DomainException], str]) -> Iterator[None]:
    try:
        yield
    except DomainException as exc:
        raise click.ClickException(f"{outcome_for(exc, outcomes)}: {exc}") from exc
