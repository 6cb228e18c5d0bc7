from __future__ import annotations

from enum import Enum


class OrderStatus(Enum):
    PENDING = "PENDING"
    IN_PREPARATION = "IN_PREPARATION"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
