"""
Commerce Configuration Value Object

Limits and defaults consumed by the stock, cart and payment components. Built
once from application settings and handed to each component at construction.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from app.core.domain import ValueObject, to_decimal

if TYPE_CHECKING:
    from app.config.settings import Settings


@dataclass(frozen=True)
class CommerceConfig(ValueObject):
    """
    Commerce limits.

    Attributes:
        cart_max_items: Maximum number of active lines per cart
        enforce_cart_max_items: Whether add_line rejects a line beyond the cap
        payment_max_amount: Largest amount a single payment may settle
        settlement_success_rate: Probability a simulated settlement succeeds
        default_currency: Currency used when a payment request names none
    """

    cart_max_items: int = 50
    enforce_cart_max_items: bool = False
    payment_max_amount: Decimal = Decimal("100000.00")
    settlement_success_rate: float = 0.9
    default_currency: str = "PEN"

    def _validate(self) -> None:
        object.__setattr__(self, "payment_max_amount", to_decimal(self.payment_max_amount))
        if self.cart_max_items < 1:
            raise ValueError("cart_max_items must be at least 1")
        if self.payment_max_amount <= 0:
            raise ValueError("payment_max_amount must be greater than zero")
        if not 0.0 <= self.settlement_success_rate <= 1.0:
            raise ValueError("settlement_success_rate must be between 0 and 1")
        if len(self.default_currency) != 3:
            raise ValueError("default_currency must be a 3-letter ISO code")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "CommerceConfig":
        """Build the configuration from application settings."""
        return cls(
            cart_max_items=settings.CART_MAX_ITEMS,
            enforce_cart_max_items=settings.CART_ENFORCE_MAX_ITEMS,
            payment_max_amount=settings.PAYMENT_MAX_AMOUNT,
            settlement_success_rate=settings.PAYMENT_SUCCESS_RATE,
            default_currency=settings.DEFAULT_CURRENCY,
        )
