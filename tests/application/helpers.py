"""Shared setup for the workflow engine tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pizzeria.application.dto import OrderItemSpec
from pizzeria.application.order_workflow import OrderWorkflowEngine
from pizzeria.domain.model.order import Order
from pizzeria.domain.model.value_objects import CustomerInfo
from tests.fakes import FakeOrderRepository

T0 = datetime(2024, 5, 1, 18, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns T0, T0+1s, T0+2s, ... one tick per call."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)) -> None:
        self._next = start
        self._step = step

    def __call__(self) -> datetime:
        now = self._next
        self._next += self._step
        return now


def customer(name: str = "Mario Rossi") -> CustomerInfo:
    return CustomerInfo(name, "+393331234567", "Via Roma 1, Napoli")


def margherita(qty: int = 1) -> list[OrderItemSpec]:
    return [OrderItemSpec("Margherita", qty, "7.50")]


def setup(clock=None) -> tuple[OrderWorkflowEngine, FakeOrderRepository]:
    repo = FakeOrderRepository()
    engine = OrderWorkflowEngine(repo, clock=clock or TickingClock())
    return engine, repo


def place(engine: OrderWorkflowEngine, name: str = "Mario Rossi") -> Order:
    return engine.create_order(customer(name), margherita())
