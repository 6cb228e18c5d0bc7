"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging

from pizzeria.application.order_workflow import OrderWorkflowEngine
from pizzeria.infrastructure.config import Settings
from pizzeria.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)


def settings() -> Settings:
    # Read on every call so the environment can change between invocations
    return Settings()


def configure_logging(config: Settings | None = None) -> None:
    config = config or settings()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def order_repository(config: Settings | None = None) -> JsonOrderRepository:
    config = config or settings()
    return JsonOrderRepository(config.data_dir / "orders.json")


def workflow_engine(config: Settings | None = None) -> OrderWorkflowEngine:
    config = config or settings()
    return OrderWorkflowEngine(
        order_repo=order_repository(config),
        code_prefix=config.order_code_prefix,
    )
