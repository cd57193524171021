"""
Cart Line Repository Implementation

SQLAlchemy implementation of ICartLineRepository.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.commerce.application.ports import ICartLineRepository
from app.domains.commerce.domain.entities import CartLine
from app.domains.commerce.domain.value_objects import Price
from app.models.db import CartLineModel, ensure_utc

logger = logging.getLogger(__name__)


class SQLAlchemyCartLineRepository(ICartLineRepository):
    """
    SQLAlchemy implementation of cart line repository.

    Reads refresh already loaded rows (populate_existing) so a line re-read
    under a cart lock reflects the latest committed state.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, line_id: int) -> CartLine | None:
        """Get cart line by ID, active or not."""
        result = await self.session.execute(
            select(CartLineModel).where(CartLineModel.id == line_id).execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_active(self, user_id: int, product_id: int) -> CartLine | None:
        """Get the active line of a user for a product."""
        result = await self.session.execute(
            select(CartLineModel)
            .where(
                CartLineModel.user_id == user_id,
                CartLineModel.product_id == product_id,
                CartLineModel.is_active.is_(True),
            )
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_active(self, user_id: int) -> list[CartLine]:
        """Active lines of a user, newest first."""
        result = await self.session.execute(
            select(CartLineModel)
            .where(CartLineModel.user_id == user_id, CartLineModel.is_active.is_(True))
            .order_by(CartLineModel.created_at.desc(), CartLineModel.id.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count_active(self, user_id: int) -> int:
        """Count active lines of a user."""
        result = await self.session.execute(
            select(func.count())
            .select_from(CartLineModel)
            .where(CartLineModel.user_id == user_id, CartLineModel.is_active.is_(True))
        )
        return result.scalar_one()

    async def sum_active_totals(self, user_id: int) -> Decimal:
        """Sum of the totals of a user's active lines."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(CartLineModel.total_price), 0)).where(
                CartLineModel.user_id == user_id,
                CartLineModel.is_active.is_(True),
            )
        )
        total = result.scalar_one()
        return Price(Decimal(str(total))).amount if total else Decimal("0.00")

    async def create(self, line: CartLine) -> CartLine:
        """Create a new cart line."""
        model = self._to_model(line)
        self.session.add(model)
        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def update(self, line: CartLine) -> CartLine:
        """Persist quantity, totals and soft-delete state of an existing line."""
        result = await self.session.execute(select(CartLineModel).where(CartLineModel.id == line.id))
        model = result.scalar_one()

        model.quantity = line.quantity
        model.unit_price = line.unit_price.amount
        model.total_price = line.total_price.amount
        model.is_active = line.is_active
        model.deleted_at = line.deleted_at
        model.updated_at = line.updated_at

        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def deactivate_all(self, user_id: int) -> int:
        """Soft-delete every active line of a user in one statement."""
        now = datetime.now(UTC)
        try:
            result = await self.session.execute(
                update(CartLineModel)
                .where(CartLineModel.user_id == user_id, CartLineModel.is_active.is_(True))
                .values(is_active=False, deleted_at=now, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
            return result.rowcount or 0
        except Exception as e:
            logger.error(f"Error clearing cart of user {user_id}: {e}")
            await self.session.rollback()
            raise

    # Mapping methods

    def _to_entity(self, model: CartLineModel) -> CartLine:
        """Convert model to entity."""
        return CartLine(
            id=model.id,
            user_id=model.user_id,
            product_id=model.product_id,
            quantity=model.quantity,
            unit_price=Price(Decimal(str(model.unit_price))),
            product_name=model.product_name,
            product_sku=model.product_sku,
            is_active=model.is_active,
            deleted_at=ensure_utc(model.deleted_at),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    def _to_model(self, line: CartLine) -> CartLineModel:
        """Convert entity to model."""
        return CartLineModel(
            user_id=line.user_id,
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=line.unit_price.amount,
            total_price=line.total_price.amount,
            product_name=line.product_name,
            product_sku=line.product_sku,
            is_active=line.is_active,
        )
