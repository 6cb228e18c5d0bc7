"""JSON-file-backed implementation of OrderRepository.

Every operation reads and rewrites the whole file while holding two
locks: a process-local one for threads, and an OS file lock on
``<file>.lock`` (``fcntl.flock`` on POSIX, ``msvcrt.locking`` on Windows)
so separate CLI processes queue up as well. Holding them for the full
read-check-write is what makes the version check and the single-slot
claim atomic.
"""

from __future__ import annotations

import json
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from pizzeria.domain.exceptions import ValidationError
from pizzeria.domain.model.order import Order, OrderLineItem, OrderStatus
from pizzeria.domain.model.value_objects import CustomerInfo, Money, Quantity
from pizzeria.domain.repository.order_repository import (
    ClaimResult,
    Conflict,
    OrderRepository,
    Saved,
    SaveResult,
    SlotOccupied,
)

if sys.platform == "win32":
    import msvcrt

    def _lock_file(lock_file) -> None:
        lock_file.seek(0)
        msvcrt.locking(lock_file.fileno(), msvcrt.LK_LOCK, 1)

    def _unlock_file(lock_file) -> None:
        lock_file.seek(0)
        msvcrt.locking(lock_file.fileno(), msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _lock_file(lock_file) -> None:
        fcntl.flock(lock_file, fcntl.LOCK_EX)

    def _unlock_file(lock_file) -> None:
        fcntl.flock(lock_file, fcntl.LOCK_UN)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock_path = file_path.with_name(file_path.name + ".lock")
        self._thread_lock = threading.Lock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> Order:
        with self._locked():
            orders = self._load_raw()
            if any(raw["code"] == order.code for raw in orders):
                raise ValidationError(f"Order code {order.code} already exists")
            raw = self._to_raw(order)
            orders.append(raw)
            self._persist_raw(orders)
        return self._to_domain(raw)

    def find_by_code(self, code: str) -> Order | None:
        with self._locked():
            for raw in self._load_raw():
                if raw["code"] == code:
                    return self._to_domain(raw)
        return None

    def find_oldest_by_status(self, status: OrderStatus) -> Order | None:
        matching = self.list_by_status(status)
        if not matching:
            return None
        # min() returns the first of equal keys, i.e. the earliest inserted
        return min(matching, key=lambda o: o.created_at)

    def exists_with_status(self, status: OrderStatus) -> bool:
        with self._locked():
            return any(raw["status"] == status.value for raw in self._load_raw())

    def save_with_version_check(self, order: Order, expected_version: int) -> SaveResult:
        with self._locked():
            orders = self._load_raw()
            return self._write_checked(orders, order, expected_version)

    def claim_for_preparation(self, order: Order, expected_version: int) -> ClaimResult:
        with self._locked():
            orders = self._load_raw()
            for raw in orders:
                if raw["status"] == OrderStatus.IN_PREPARATION.value:
                    return SlotOccupied(holder_code=raw["code"])
            return self._write_checked(orders, order, expected_version)

    def list_all(self) -> list[Order]:
        with self._locked():
            return [self._to_domain(raw) for raw in self._load_raw()]

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        with self._locked():
            return [
                self._to_domain(raw)
                for raw in self._load_raw()
                if raw["status"] == status.value
            ]

    # --- Versioned write (caller holds the lock) ------------------------------

    def _write_checked(
        self, orders: list[dict], order: Order, expected_version: int
    ) -> Saved | Conflict:
        for i, raw in enumerate(orders):
            if raw["code"] != order.code:
                continue
            if raw["version"] != expected_version:
                return Conflict(expected_version=expected_version, actual_version=raw["version"])
            new_raw = self._to_raw(order)
            new_raw["version"] = expected_version + 1
            orders[i] = new_raw
            self._persist_raw(orders)
            return Saved(self._to_domain(new_raw))
        raise ValidationError(f"Order {order.code} was never added")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "code": order.code,
            "status": order.status.value,
            "version": order.version,
            "created_at": order.created_at.isoformat(),
            "customer": {
                "name": order.customer.name,
                "phone": order.customer.phone,
                "delivery_address": order.customer.delivery_address,
            },
            "items": [
                {
                    "pizza_name": item.pizza_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                pizza_name=i["pizza_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "EUR")),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            code=raw["code"],
            customer=CustomerInfo(**raw["customer"]),
            items=items,
            status=OrderStatus(raw["status"]),
            version=raw["version"],
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._thread_lock, open(self._lock_path, "a+") as lock_file:
            _lock_file(lock_file)
            try:
                yield
            finally:
                _unlock_file(lock_file)

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
