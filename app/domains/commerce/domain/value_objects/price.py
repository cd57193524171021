"""
Price Value Object for the Commerce Domain

Unit prices of products and cart lines, fixed-point with two fractional digits.
"""

from dataclasses import dataclass
from decimal import Decimal

from app.core.domain import ValueObject, quantize_money, to_decimal


@dataclass(frozen=True)
class Price(ValueObject):
    """
    Price value object.

    Example:
        ```python
        unit = Price(Decimal("1500.00"))
        unit.multiply(3).amount  # Decimal("4500.00")
        ```
    """

    amount: Decimal

    def _validate(self) -> None:
        """Validate price constraints."""
        object.__setattr__(self, "amount", quantize_money(to_decimal(self.amount)))
        if self.amount < 0:
            raise ValueError("Price cannot be negative")

    def multiply(self, quantity: int) -> "Price":
        """Multiply price by quantity."""
        return Price(amount=self.amount * quantity)

    def is_positive(self) -> bool:
        return self.amount > 0

    def __str__(self) -> str:
        return f"{self.amount:,.2f}"

    @classmethod
    def zero(cls) -> "Price":
        """Create a zero price."""
        return cls(amount=Decimal("0"))
