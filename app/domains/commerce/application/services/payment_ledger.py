"""
Payment Ledger

One payment per order. Settlement validates the request, records a PENDING
payment, asks the settlement gateway for an outcome and records COMPLETED or
FAILED. Settlement of a given order id runs under that order's lock, and the
storage layer rejects a second row for the same order as a backstop.
"""

import logging
from decimal import Decimal

from app.core.domain import ValidationException, quantize_money, to_decimal
from app.core.shared import KeyedLock
from app.domains.commerce.application.dto import PaymentDTO, PaymentStatistics
from app.domains.commerce.application.ports import IPaymentRepository
from app.domains.commerce.domain.entities import Payment
from app.domains.commerce.domain.entities.payment import SETTLEMENT_FAILURE_REASON
from app.domains.commerce.domain.exceptions import (
    AmountTooLargeException,
    DuplicatePaymentException,
    InvalidAmountException,
    MissingOrderException,
    PaymentNotFoundException,
)
from app.domains.commerce.domain.services import SettlementGateway, SimulatedSettlementGateway
from app.domains.commerce.domain.value_objects import CommerceConfig, PaymentStatus

logger = logging.getLogger(__name__)


class PaymentLedger:
    """
    Payment settlement and administration.

    Example:
        ```python
        ledger = PaymentLedger(payment_repository, CommerceConfig(), FixedSettlementGateway())
        payment = await ledger.settle(order_id=7, amount=Decimal("9999.99"), user_id=1)
        payment.status  # "COMPLETED"
        ```
    """

    def __init__(
        self,
        payment_repository: IPaymentRepository,
        config: CommerceConfig | None = None,
        settlement_gateway: SettlementGateway | None = None,
        order_locks: KeyedLock | None = None,
    ):
        """
        Initialize the ledger.

        Args:
            payment_repository: Payment persistence
            config: Payment ceiling and default currency
            settlement_gateway: Strategy deciding settlement outcomes
            order_locks: Per-order serialization of settlement
        """
        self.payment_repo = payment_repository
        self.config = config or CommerceConfig()
        self.gateway = settlement_gateway or SimulatedSettlementGateway(self.config.settlement_success_rate)
        self._locks = order_locks or KeyedLock("payment")

    # ==================== Settlement ====================

    async def settle(
        self,
        order_id: int | None,
        amount: Decimal | int | float | str | None,
        payment_method: str | None = None,
        description: str | None = None,
        currency: str | None = None,
        user_id: int | None = None,
    ) -> PaymentDTO:
        """
        Settle the payment of an order.

        Args:
            order_id: Order being paid; at most one payment may exist for it
            amount: Amount to settle, greater than zero and within the ceiling
            payment_method: Free-form method label
            description: Free-form description
            currency: 3-letter code, defaults to the configured currency
            user_id: Paying user

        Returns:
            The payment in its final COMPLETED or FAILED state

        Raises:
            InvalidAmountException: If amount is missing or not positive once rounded to cents
            AmountTooLargeException: If amount exceeds the configured ceiling
            MissingOrderException: If order_id is missing
            ValidationException: If currency is not a 3-letter code
            DuplicatePaymentException: If a payment already exists for the order
        """
        value = self._validate_amount(amount)
        if order_id is None:
            raise MissingOrderException()
        currency = self._resolve_currency(currency)

        async with self._locks.hold(order_id):
            if await self.payment_repo.exists_for_order(order_id):
                logger.warning(f"Rejected duplicate payment for order {order_id}")
                raise DuplicatePaymentException(order_id)

            payment = Payment.open(
                order_id=order_id,
                amount=value,
                user_id=user_id,
                payment_method=payment_method,
                description=description,
                currency=currency,
            )
            payment = await self.payment_repo.create(payment)

            try:
                result = await self.gateway.settle(payment)
            except Exception as e:
                logger.error(f"Settlement of {payment.transaction_id} raised, left PENDING: {e}", exc_info=True)
                raise

            if result.approved:
                payment.complete()
            else:
                payment.fail(result.failure_reason or SETTLEMENT_FAILURE_REASON)
            payment = await self.payment_repo.update(payment)

        logger.info(
            f"Payment {payment.transaction_id} for order {order_id} settled as {payment.status.value} "
            f"({payment.currency} {payment.amount})"
        )
        return PaymentDTO.from_entity(payment)

    # ==================== Administration ====================

    async def update_status(self, payment_id: int, new_status: PaymentStatus | str) -> PaymentDTO:
        """
        Force a payment into ``new_status`` regardless of its current state.

        This is the administrative correction path; it deliberately bypasses
        the one-directional settlement transitions.

        Raises:
            ValidationException: If new_status is not a known status
            PaymentNotFoundException: If the payment does not exist
        """
        status = _parse_status(new_status)
        payment = await self._get(payment_id)
        previous = payment.status

        payment.force_status(status)
        payment = await self.payment_repo.update(payment)

        logger.warning(f"Payment {payment_id} status overridden: {previous.value} -> {status.value}")
        return PaymentDTO.from_entity(payment)

    # ==================== Queries ====================

    async def get_by_id(self, payment_id: int) -> PaymentDTO:
        return PaymentDTO.from_entity(await self._get(payment_id))

    async def get_by_transaction_id(self, transaction_id: str) -> PaymentDTO:
        payment = await self.payment_repo.get_by_transaction_id(transaction_id)
        if payment is None:
            raise PaymentNotFoundException(transaction_id, field="transaction id")
        return PaymentDTO.from_entity(payment)

    async def list_by_user(self, user_id: int) -> list[PaymentDTO]:
        return _to_dtos(await self.payment_repo.list_by_user(user_id))

    async def list_by_status(self, status: PaymentStatus | str) -> list[PaymentDTO]:
        return _to_dtos(await self.payment_repo.list_by_status(_parse_status(status)))

    async def list_by_order(self, order_id: int) -> list[PaymentDTO]:
        return _to_dtos(await self.payment_repo.list_by_order(order_id))

    async def list_pending(self) -> list[PaymentDTO]:
        """Pending payments, oldest first."""
        return _to_dtos(await self.payment_repo.list_pending())

    async def statistics(self) -> PaymentStatistics:
        """Counts per status and the sum of completed amounts."""
        counts = await self.payment_repo.count_by_status()
        completed_amount = await self.payment_repo.sum_amount(PaymentStatus.COMPLETED)
        return PaymentStatistics(
            total_payments=sum(counts.values()),
            pending_payments=counts.get(PaymentStatus.PENDING, 0),
            completed_payments=counts.get(PaymentStatus.COMPLETED, 0),
            failed_payments=counts.get(PaymentStatus.FAILED, 0),
            total_completed_amount=completed_amount,
        )

    # ==================== Helpers ====================

    async def _get(self, payment_id: int) -> Payment:
        payment = await self.payment_repo.get_by_id(payment_id)
        if payment is None:
            raise PaymentNotFoundException(payment_id)
        return payment

    def _validate_amount(self, amount: Decimal | int | float | str | None) -> Decimal:
        if amount is None:
            raise InvalidAmountException(None)
        try:
            value = to_decimal(amount)
        except ValueError as e:
            raise InvalidAmountException(None) from e
        if not value.is_finite() or value <= 0:
            raise InvalidAmountException(value)
        if value > self.config.payment_max_amount:
            raise AmountTooLargeException(value, self.config.payment_max_amount)
        # Persisted in cents
        cents = quantize_money(value)
        if cents <= 0:
            raise InvalidAmountException(value)
        return cents

    def _resolve_currency(self, currency: str | None) -> str:
        code = (currency or self.config.default_currency).strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValidationException(f"Invalid currency code '{currency}'", field="currency")
        return code


def _parse_status(status: PaymentStatus | str) -> PaymentStatus:
    if isinstance(status, PaymentStatus):
        return status
    try:
        return PaymentStatus.from_string(status)
    except ValueError as e:
        raise ValidationException(
            f"Invalid payment status '{status}'. Expected one of {PaymentStatus.values()}",
            field="status",
        ) from e


def _to_dtos(payments: list[Payment]) -> list[PaymentDTO]:
    return [PaymentDTO.from_entity(payment) for payment in payments]
