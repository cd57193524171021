"""
Payment Entity

Settlement record of a single order.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from app.core.domain import AggregateRoot, InvalidOperationException, Money, utc_now

from ..value_objects.payment_status import PaymentStatus

TRANSACTION_PREFIX = "TXN-"
SETTLEMENT_FAILURE_REASON = "Payment processing error"
MANUAL_FAILURE_REASON = "Status manually updated to failed"


def generate_transaction_id() -> str:
    """Prefix plus an 8 character upper-case hex token."""
    return f"{TRANSACTION_PREFIX}{uuid.uuid4().hex[:8].upper()}"


@dataclass
class Payment(AggregateRoot[int]):
    """
    Payment aggregate.

    Normal lifecycle: created PENDING, then settled once into COMPLETED or
    FAILED through ``complete``/``fail``, which refuse to leave a terminal
    state. ``force_status`` is the administrative correction path and applies
    any status regardless of the current one.

    Example:
        ```python
        payment = Payment.open(order_id=7, amount=Decimal("9999.99"), user_id=1)
        payment.complete()
        payment.force_status(PaymentStatus.FAILED)
        ```
    """

    order_id: int = 0
    user_id: int | None = None
    amount: Decimal = Decimal("0")
    currency: str = "PEN"
    payment_method: str | None = None
    description: str | None = None
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str = field(default_factory=generate_transaction_id)
    failure_reason: str | None = None
    processed_at: datetime | None = None

    @classmethod
    def open(
        cls,
        order_id: int,
        amount: Decimal,
        user_id: int | None = None,
        payment_method: str | None = None,
        description: str | None = None,
        currency: str = "PEN",
    ) -> "Payment":
        """Create a PENDING payment with a fresh transaction id."""
        money = Money(amount=amount, currency=currency)
        return cls(
            order_id=order_id,
            user_id=user_id,
            amount=money.amount,
            currency=money.currency,
            payment_method=payment_method,
            description=description,
        )

    # Settlement transitions

    def complete(self) -> None:
        """Mark a pending payment as settled."""
        self._ensure_can_transition(PaymentStatus.COMPLETED, "complete")
        self._mark_completed()

    def fail(self, reason: str = SETTLEMENT_FAILURE_REASON) -> None:
        """Mark a pending payment as failed."""
        self._ensure_can_transition(PaymentStatus.FAILED, "fail")
        self._mark_failed(reason)

    # Administrative override

    def force_status(self, new_status: PaymentStatus) -> None:
        """
        Apply ``new_status`` without consulting the settlement state machine.

        COMPLETED and FAILED stamp processed_at; PENDING only touches updated_at.
        """
        if new_status == PaymentStatus.COMPLETED:
            self._mark_completed()
        elif new_status == PaymentStatus.FAILED:
            self._mark_failed(MANUAL_FAILURE_REASON)
        else:
            self.status = PaymentStatus.PENDING
            self.touch()

    def is_settled(self) -> bool:
        return self.status.is_terminal()

    def _ensure_can_transition(self, target: PaymentStatus, operation: str) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidOperationException(operation=operation, current_state=self.status.value)

    def _mark_completed(self) -> None:
        self.status = PaymentStatus.COMPLETED
        self.processed_at = utc_now()
        self.touch()

    def _mark_failed(self, reason: str) -> None:
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason
        self.processed_at = utc_now()
        self.touch()
