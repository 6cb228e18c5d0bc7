"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from pizzeria.domain.exceptions import ValidationError

MIN_UNIT_PRICE = Decimal("0.01")
MAX_UNIT_PRICE = Decimal("10000")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors.
    """

    amount: Decimal
    currency: str = "EUR"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __str__(self) -> str:
        return f"€{self.amount:.2f}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; "True pizzas" is not a quantity
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


_PHONE_PATTERN = re.compile(r"^\+?\d{9,15}$")


@dataclass(frozen=True)
class CustomerInfo:
    """Who ordered and where the pizzas go.

    All three fields are required; a customer can change them while the
    order is still pending, but never blank them out.
    """

    name: str
    phone: str
    delivery_address: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not 2 <= len(self.name.strip()) <= 100:
            raise ValidationError("Customer name must be between 2 and 100 characters")
        if not isinstance(self.phone, str) or not _PHONE_PATTERN.match(self.phone):
            raise ValidationError(f"Invalid phone number: {self.phone!r}")
        if (
            not isinstance(self.delivery_address, str)
            or not self.delivery_address.strip()
            or len(self.delivery_address) > 200
        ):
            raise ValidationError(
                "Delivery address is required and must be at most 200 characters"
            )
