"""
Commerce Domain Exceptions

Typed outcomes of the stock, cart and payment components. Each one carries the
context a caller needs to react (ids, requested vs available, limits).
"""

from decimal import Decimal
from typing import Any

from app.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    DuplicateEntityException,
    EntityNotFoundException,
    InvalidOperationException,
    PaymentException,
)


class ProductNotFoundException(EntityNotFoundException):
    """No active product exists with the given id."""

    def __init__(self, product_id: Any):
        super().__init__("Product", product_id)
        self.product_id = product_id


class CartLineNotFoundException(EntityNotFoundException):
    def __init__(self, line_id: Any):
        super().__init__("CartLine", line_id)
        self.line_id = line_id


class CartLineNotOwnedException(AuthorizationException):
    """The cart line belongs to a different user."""

    def __init__(self, line_id: Any, user_id: Any):
        super().__init__(operation="access cart line", resource=f"CartLine {line_id}", user_id=user_id)
        self.line_id = line_id
        self.code = "CART_LINE_NOT_OWNED"
        self.details["line_id"] = str(line_id)


class InactiveCartLineException(InvalidOperationException):
    """The cart line was removed and can no longer be read or modified."""

    def __init__(self, line_id: Any, operation: str = "update"):
        super().__init__(
            operation=operation,
            current_state="inactive",
            message=f"Cart line {line_id} is no longer active",
        )
        self.line_id = line_id
        self.code = "INACTIVE_CART_LINE"
        self.details["line_id"] = str(line_id)


class CartLimitExceededException(BusinessRuleViolationException):
    def __init__(self, user_id: Any, limit: int):
        super().__init__(
            rule="cart_max_items",
            message=f"Cart of user {user_id} already holds the maximum of {limit} lines",
            details={"user_id": str(user_id), "limit": limit},
        )
        self.user_id = user_id
        self.limit = limit
        self.code = "CART_LIMIT_EXCEEDED"


class InvalidAmountException(PaymentException):
    def __init__(self, amount: Decimal | None):
        super().__init__(
            "Payment amount must be greater than zero",
            reason=f"amount={amount}",
            code="INVALID_AMOUNT",
        )
        self.amount = amount


class AmountTooLargeException(PaymentException):
    def __init__(self, amount: Decimal, ceiling: Decimal):
        super().__init__(
            f"Payment amount {amount} exceeds the maximum allowed of {ceiling}",
            reason=f"amount={amount}, ceiling={ceiling}",
            code="AMOUNT_TOO_LARGE",
        )
        self.amount = amount
        self.ceiling = ceiling
        self.details["ceiling"] = str(ceiling)


class MissingOrderException(PaymentException):
    def __init__(self):
        super().__init__("Order id is required to settle a payment", code="MISSING_ORDER")


class DuplicatePaymentException(DuplicateEntityException):
    """A payment of any status already exists for the order."""

    def __init__(self, order_id: Any):
        super().__init__("Payment", "order_id", order_id)
        self.order_id = order_id
        self.code = "DUPLICATE_PAYMENT"
        self.message = f"A payment already exists for order {order_id}"
        self.args = (self.message,)


class PaymentNotFoundException(EntityNotFoundException):
    def __init__(self, payment_id: Any, field: str = "id"):
        message = f"Payment with {field} {payment_id} not found" if field != "id" else None
        super().__init__("Payment", payment_id, message)
        self.payment_id = payment_id
