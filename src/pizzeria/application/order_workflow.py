"""Application service: the order workflow engine.

Every state-changing use case, for customers and preparers alike, runs
through ``OrderWorkflowEngine``. Each call is one unit of work:

1. load the order by code (a detached snapshot),
2. check the status preconditions,
3. mutate the snapshot,
4. write it back with an optimistic version check.

The engine owns the kitchen rule that at most one order is
IN_PREPARATION. The "is anyone preparing?" check done up front is only
a fast path; the rule is actually enforced by the repository's atomic
``claim_for_preparation``, so two preparers racing past the check
cannot both win.

Failures are raised as typed DomainException subclasses and never
retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable

from pizzeria.application.dto import OrderItemSpec, OrderUpdate, UNSET
from pizzeria.domain.exceptions import (
    ConcurrencyConflictError,
    InvalidOrderStatusError,
    OrderModificationNotAllowedError,
    OrderNotFoundError,
    PreparationSlotTakenError,
    ValidationError,
)
from pizzeria.domain.model.order import Order, OrderLineItem, OrderStatus
from pizzeria.domain.model.value_objects import CustomerInfo, Money, Quantity
from pizzeria.domain.repository.order_repository import (
    ClaimResult,
    Conflict,
    OrderRepository,
    SaveResult,
    SlotOccupied,
)
from pizzeria.domain.service.status_transitions import (
    can_be_modified_by_customer,
    can_be_taken_by_preparer,
    validate_transition,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_MAX_CODE_ATTEMPTS = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderWorkflowEngine:

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Clock = _utcnow,
        code_prefix: str = "ORD",
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock
        self._code_prefix = code_prefix

    # --- Customer-facing ------------------------------------------------------

    def create_order(self, customer: CustomerInfo, item_specs: list[OrderItemSpec]) -> Order:
        """Create a new PENDING order with a fresh code."""
        logger.info("Creating new order for customer: %s", customer.name)

        order = Order.create(
            code=self._new_code(),
            customer=customer,
            items=self._build_items(item_specs),
            created_at=self._clock(),
        )
        saved = self._order_repo.add(order)

        logger.info("Order %s created successfully", saved.code)
        return saved

    def get_by_code(self, code: str) -> Order | None:
        """Return the current snapshot, or None. Not finding it is not an error."""
        logger.debug("Fetching order by code: %s", code)
        return self._order_repo.find_by_code(code)

    def update_order(
        self,
        code: str,
        update: OrderUpdate,
        expected_version: int | None = None,
    ) -> Order:
        """Apply the fields present in *update* to a PENDING order."""
        logger.info("Updating order: %s", code)

        order = self._load(code, expected_version)
        if not can_be_modified_by_customer(order.status):
            logger.warning("Attempt to modify order %s with status %s", code, order.status.value)
            raise OrderModificationNotAllowedError(
                f"Order cannot be updated as its status is {order.status.value}"
            )

        if update.is_empty:
            return order

        changes = update.present_fields()
        items = changes.pop("items", UNSET)
        if items is not UNSET:
            if items is None:
                raise ValidationError("Order items cannot be cleared")
            order.replace_items(self._build_items(items))
        if changes:
            order.change_customer(**changes)

        updated = self._save(order)
        logger.info("Order %s updated successfully", code)
        return updated

    def cancel_order(self, code: str, expected_version: int | None = None) -> Order:
        """Cancel a PENDING order on the customer's behalf."""
        logger.info("Canceling order: %s", code)

        order = self._load(code, expected_version)
        if not can_be_modified_by_customer(order.status):
            logger.warning("Attempt to cancel order %s with status %s", code, order.status.value)
            raise OrderModificationNotAllowedError(
                f"Order cannot be canceled as its status is {order.status.value}"
            )

        order.transition_to(OrderStatus.CANCELED)
        canceled = self._save(order)
        logger.info("Order %s canceled successfully", code)
        return canceled

    # --- Preparer-facing ------------------------------------------------------

    def get_all_orders(self) -> list[Order]:
        logger.debug("Fetching all orders, ordered by creation date")
        return _oldest_first(self._order_repo.list_all())

    def get_all_pending_orders(self) -> list[Order]:
        logger.debug("Fetching pending orders, ordered by creation date")
        return _oldest_first(self._order_repo.list_by_status(OrderStatus.PENDING))

    def take_order(self, code: str) -> Order:
        """Claim a specific PENDING order for preparation."""
        logger.info("Preparer attempting to take order: %s", code)

        order = self._load(code)
        self._ensure_kitchen_free(code)
        if not can_be_taken_by_preparer(order.status):
            logger.warning("Attempt to take order %s with status %s", code, order.status.value)
            raise OrderModificationNotAllowedError(
                f"Order can only be taken if status is PENDING. "
                f"Current status: {order.status.value}"
            )

        order.transition_to(OrderStatus.IN_PREPARATION)
        taken = self._claim(order)
        logger.info("Order %s taken successfully, status changed to IN_PREPARATION", code)
        return taken

    def take_next_order(self) -> Order:
        """Claim the oldest PENDING order for preparation."""
        logger.info("Preparer attempting to take the next pending order")

        self._ensure_kitchen_free(None)
        order = self._order_repo.find_oldest_by_status(OrderStatus.PENDING)
        if order is None:
            logger.info("No pending orders available to be taken")
            raise OrderNotFoundError("No pending orders found to be taken.")

        order.transition_to(OrderStatus.IN_PREPARATION)
        taken = self._claim(order)
        logger.info(
            "Next pending order %s taken successfully, status changed to IN_PREPARATION",
            taken.code,
        )
        return taken

    def update_status(
        self,
        code: str,
        new_status: OrderStatus | str | None,
        expected_version: int | None = None,
    ) -> Order:
        """Move an order along the status graph.

        Re-applying the current status returns the order unchanged and
        writes nothing. Moving to IN_PREPARATION goes through the same
        single-slot claim as ``take_order``.
        """
        logger.info("Updating order %s status to %s", code, new_status)

        order = self._load(code, expected_version)
        target = _parse_status(new_status)
        try:
            validate_transition(order.status, target)
        except InvalidOrderStatusError:
            logger.warning(
                "Rejected status change of order %s: %s -> %s",
                code, order.status.value, target.value,
            )
            raise

        if target is order.status:
            return order

        order.transition_to(target)
        if target is OrderStatus.IN_PREPARATION:
            updated = self._claim(order)
        else:
            updated = self._save(order)
        logger.info("Order %s status updated successfully to %s", code, target.value)
        return updated

    # --- Internal helpers -----------------------------------------------------

    def _load(self, code: str, expected_version: int | None = None) -> Order:
        order = self._order_repo.find_by_code(code)
        if order is None:
            raise OrderNotFoundError(f"Order with code {code} not found.")
        if expected_version is not None and expected_version != order.version:
            logger.warning(
                "Stale view of order %s: caller has version %d, stored is %d",
                code, expected_version, order.version,
            )
            raise ConcurrencyConflictError(code, expected_version, order.version)
        return order

    def _ensure_kitchen_free(self, code: str | None) -> None:
        if self._order_repo.exists_with_status(OrderStatus.IN_PREPARATION):
            logger.warning(
                "Cannot take order %s: another order is currently IN_PREPARATION",
                code or "(next)",
            )
            raise PreparationSlotTakenError(
                "Cannot take a new order because another order is currently IN_PREPARATION."
            )

    def _save(self, order: Order) -> Order:
        return self._unwrap(order, self._order_repo.save_with_version_check(order, order.version))

    def _claim(self, order: Order) -> Order:
        return self._unwrap(order, self._order_repo.claim_for_preparation(order, order.version))

    @staticmethod
    def _unwrap(order: Order, result: SaveResult | ClaimResult) -> Order:
        if isinstance(result, SlotOccupied):
            logger.warning(
                "Lost the race for order %s: order %s is already IN_PREPARATION",
                order.code, result.holder_code,
            )
            raise PreparationSlotTakenError(
                "Cannot take a new order because another order is currently IN_PREPARATION."
            )
        if isinstance(result, Conflict):
            logger.warning(
                "Concurrent modification of order %s (expected version %d, found %d)",
                order.code, result.expected_version, result.actual_version,
            )
            raise ConcurrencyConflictError(
                order.code, result.expected_version, result.actual_version
            )
        return result.order

    def _new_code(self) -> str:
        for _ in range(_MAX_CODE_ATTEMPTS):
            code = f"{self._code_prefix}-{uuid.uuid4().hex[:8].upper()}"
            if self._order_repo.find_by_code(code) is None:
                return code
        raise RuntimeError("Could not generate a unique order code")

    @staticmethod
    def _build_items(item_specs: list[OrderItemSpec]) -> list[OrderLineItem]:
        if not item_specs:
            raise ValidationError("Order must contain at least one item")
        return [
            OrderLineItem(
                pizza_name=spec.pizza_name.strip(),
                quantity=Quantity(spec.quantity),
                unit_price=Money.of(spec.unit_price),
            )
            for spec in item_specs
        ]


def _oldest_first(orders: list[Order]) -> list[Order]:
    # sorted() is stable, so equal timestamps keep insertion order
    return sorted(orders, key=lambda o: o.created_at)


def _parse_status(value: OrderStatus | str | None) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    if value is None:
        raise InvalidOrderStatusError("New order status cannot be null.")
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError as exc:
        raise InvalidOrderStatusError(f"Unknown order status: {value!r}") from exc
