"""
Payment Repository Implementation

SQLAlchemy implementation of IPaymentRepository.
"""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.commerce.application.ports import IPaymentRepository
from app.domains.commerce.domain.entities import Payment
from app.domains.commerce.domain.exceptions import DuplicatePaymentException
from app.domains.commerce.domain.value_objects import PaymentStatus, Price
from app.models.db import PaymentModel, ensure_utc

logger = logging.getLogger(__name__)


class SQLAlchemyPaymentRepository(IPaymentRepository):
    """
    SQLAlchemy implementation of payment repository.

    The unique constraint on ``order_id`` is surfaced as
    DuplicatePaymentException when an insert loses a race.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """Create a new payment."""
        model = self._to_model(payment)
        self.session.add(model)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if await self.exists_for_order(payment.order_id):
                raise DuplicatePaymentException(payment.order_id) from None
            logger.error(f"Integrity error creating payment {payment.transaction_id}", exc_info=True)
            raise
        await self.session.refresh(model)
        return self._to_entity(model)

    async def update(self, payment: Payment) -> Payment:
        """Persist status fields of an existing payment."""
        result = await self.session.execute(select(PaymentModel).where(PaymentModel.id == payment.id))
        model = result.scalar_one()

        model.status = payment.status
        model.failure_reason = payment.failure_reason
        model.processed_at = payment.processed_at
        model.updated_at = payment.updated_at

        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def get_by_id(self, payment_id: int) -> Payment | None:
        """Get payment by ID."""
        result = await self.session.execute(
            select(PaymentModel).where(PaymentModel.id == payment_id).execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        """Get payment by transaction id."""
        result = await self.session.execute(
            select(PaymentModel).where(PaymentModel.transaction_id == transaction_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def exists_for_order(self, order_id: int) -> bool:
        """Whether any payment, in any status, exists for the order."""
        result = await self.session.execute(
            select(func.count()).select_from(PaymentModel).where(PaymentModel.order_id == order_id)
        )
        return result.scalar_one() > 0

    async def list_by_user(self, user_id: int) -> list[Payment]:
        """Payments of a user, newest first."""
        return await self._list(
            select(PaymentModel)
            .where(PaymentModel.user_id == user_id)
            .order_by(PaymentModel.created_at.desc(), PaymentModel.id.desc())
        )

    async def list_by_order(self, order_id: int) -> list[Payment]:
        """Payments of an order."""
        return await self._list(
            select(PaymentModel)
            .where(PaymentModel.order_id == order_id)
            .order_by(PaymentModel.created_at.desc(), PaymentModel.id.desc())
        )

    async def list_by_status(self, status: PaymentStatus) -> list[Payment]:
        """Payments in a status, newest first."""
        return await self._list(
            select(PaymentModel)
            .where(PaymentModel.status == status)
            .order_by(PaymentModel.created_at.desc(), PaymentModel.id.desc())
        )

    async def list_pending(self) -> list[Payment]:
        """Pending payments, oldest first."""
        return await self._list(
            select(PaymentModel)
            .where(PaymentModel.status == PaymentStatus.PENDING)
            .order_by(PaymentModel.created_at.asc(), PaymentModel.id.asc())
        )

    async def count_by_status(self) -> dict[PaymentStatus, int]:
        """Number of payments per status."""
        result = await self.session.execute(
            select(PaymentModel.status, func.count()).group_by(PaymentModel.status)
        )
        return {PaymentStatus(status): count for status, count in result.all()}

    async def sum_amount(self, status: PaymentStatus) -> Decimal:
        """Sum of amounts of payments in a status."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(PaymentModel.amount), 0)).where(PaymentModel.status == status)
        )
        total = result.scalar_one()
        return Price(Decimal(str(total))).amount if total else Decimal("0.00")

    async def _list(self, query) -> list[Payment]:
        result = await self.session.execute(query.execution_options(populate_existing=True))
        return [self._to_entity(m) for m in result.scalars().all()]

    # Mapping methods

    def _to_entity(self, model: PaymentModel) -> Payment:
        """Convert model to entity."""
        return Payment(
            id=model.id,
            order_id=model.order_id,
            user_id=model.user_id,
            amount=Decimal(str(model.amount)),
            currency=model.currency,
            payment_method=model.payment_method,
            description=model.description,
            status=PaymentStatus(model.status),
            transaction_id=model.transaction_id,
            failure_reason=model.failure_reason,
            processed_at=ensure_utc(model.processed_at),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    def _to_model(self, payment: Payment) -> PaymentModel:
        """Convert entity to model."""
        return PaymentModel(
            order_id=payment.order_id,
            user_id=payment.user_id,
            amount=payment.amount,
            currency=payment.currency,
            payment_method=payment.payment_method,
            description=payment.description,
            status=payment.status,
            transaction_id=payment.transaction_id,
            failure_reason=payment.failure_reason,
            processed_at=payment.processed_at,
        )
