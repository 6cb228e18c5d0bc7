"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A value or invariant was malformed (e.g. an empty item list)."""


class OrderNotFoundError(DomainException):
    """No order matches the given code, or there is nothing to take."""


class OrderModificationNotAllowedError(DomainException):
    """A status precondition on the order (or on the kitchen) was violated."""


class InvalidOrderStatusError(DomainException):
    """The requested status is undefined or not reachable from the current one."""


class ConcurrencyConflictError(DomainException):
    """The order changed since the caller read it; reload and retry."""

    def __init__(self, code: str, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Order {code} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
        self.code = code
        self.expected_version = expected_version
        self.actual_version = actual_version


class PreparationSlotTakenError(OrderModificationNotAllowedError):
    """Another order is already IN_PREPARATION; only one may be at a time."""
