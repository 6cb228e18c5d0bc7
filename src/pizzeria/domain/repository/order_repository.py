"""Abstract repository for the Order aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON file, in-memory)
live elsewhere.

Writes are optimistic: every save names the version the caller read,
and the repository answers with a result value instead of raising, so
the caller has to look at the outcome.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from pizzeria.domain.model.order import Order, OrderStatus


@dataclass(frozen=True)
class Saved:
    """The write went through; ``order`` carries the new version."""

    order: Order


@dataclass(frozen=True)
class Conflict:
    """Someone else saved first; the stored version is ``actual_version``."""

    expected_version: int
    actual_version: int


@dataclass(frozen=True)
class SlotOccupied:
    """Another order already holds IN_PREPARATION."""

    holder_code: str


SaveResult = Union[Saved, Conflict]
ClaimResult = Union[Saved, Conflict, SlotOccupied]


class OrderRepository(ABC):
    """Keyed storage of orders.

    Every order handed out is a detached snapshot: changing it has no
    effect until it is passed back to one of the save methods.
    Listings keep insertion order; callers sort as they need.
    """

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Insert a newly created order and return the stored snapshot.

        Raises ValidationError if an order with the same code exists.
        """

    @abstractmethod
    def find_by_code(self, code: str) -> Order | None:
        """Return an order by its business code, or None if not found."""

    @abstractmethod
    def find_oldest_by_status(self, status: OrderStatus) -> Order | None:
        """Return the order in *status* with the earliest ``created_at``.

        Ties go to the order that was added first.
        """

    @abstractmethod
    def exists_with_status(self, status: OrderStatus) -> bool:
        """True if at least one order is currently in *status*."""

    @abstractmethod
    def save_with_version_check(self, order: Order, expected_version: int) -> SaveResult:
        """Persist *order* if the stored version still equals *expected_version*.

        On success the stored version becomes ``expected_version + 1``.
        On conflict nothing is written.
        """

    @abstractmethod
    def claim_for_preparation(self, order: Order, expected_version: int) -> ClaimResult:
        """Atomically persist *order* as the one order IN_PREPARATION.

        In one critical section: fail with SlotOccupied if any stored
        order is IN_PREPARATION (the stored copy of *order* included),
        then with Conflict on a stale version, otherwise write exactly as
        ``save_with_version_check`` would.
        """

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order."""

    @abstractmethod
    def list_by_status(self, status: OrderStatus) -> list[Order]:
        """Return every order currently in *status*."""
