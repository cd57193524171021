"""
Base Value Object Classes

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

from abc import ABC
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Self

CENTS = Decimal("0.01")


def to_decimal(value: int | float | str | Decimal) -> Decimal:
    """Coerce a numeric value to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal value: {value!r}") from e


def quantize_money(value: Decimal) -> Decimal:
    """Round a monetary amount to two fractional digits, half up."""
    return value.quantize(CENTS, ROUND_HALF_UP)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object for financial calculations.

    Example:
        ```python
        amount = Money(amount=Decimal("9999.99"), currency="PEN")
        amount.add(Money(Decimal("0.01"), "PEN"))  # PEN 10,000.00
        ```
    """

    amount: Decimal
    currency: str = "PEN"

    def _validate(self) -> None:
        object.__setattr__(self, "amount", quantize_money(to_decimal(self.amount)))
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        if not self.currency or len(self.currency) != 3 or not self.currency.isalpha():
            raise ValueError("Currency must be a 3-letter ISO code")
        object.__setattr__(self, "currency", self.currency.upper())

    def add(self, other: "Money") -> "Money":
        """Add two Money values (must be same currency)."""
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency} to {other.currency}")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def exceeds(self, ceiling: Decimal) -> bool:
        return self.amount > ceiling

    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.amount > Decimal("0")

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:,.2f}"

    @classmethod
    def zero(cls, currency: str = "PEN") -> "Money":
        """Create a zero Money value."""
        return cls(amount=Decimal("0"), currency=currency)


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Provides common functionality for all status value objects.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")
