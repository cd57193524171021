"""
Commerce Domain Container.

Single Responsibility: Wire commerce repositories and components per session.
"""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.commerce.application.services import CartStore, PaymentLedger, StockAuthority
from app.domains.commerce.infrastructure.repositories import (
    SQLAlchemyCartLineRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyProductRepository,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer

logger = logging.getLogger(__name__)


class CommerceContainer:
    """
    Commerce domain container.

    Single Responsibility: Create commerce repositories and components.
    """

    def __init__(self, base: "BaseContainer"):
        """
        Initialize commerce container.

        Args:
            base: BaseContainer with shared singletons
        """
        self._base = base

    # ==================== REPOSITORIES ====================

    def create_product_repository(self, db: AsyncSession) -> SQLAlchemyProductRepository:
        """Create Product Repository."""
        return SQLAlchemyProductRepository(session=db)

    def create_cart_line_repository(self, db: AsyncSession) -> SQLAlchemyCartLineRepository:
        """Create Cart Line Repository."""
        return SQLAlchemyCartLineRepository(session=db)

    def create_payment_repository(self, db: AsyncSession) -> SQLAlchemyPaymentRepository:
        """Create Payment Repository."""
        return SQLAlchemyPaymentRepository(session=db)

    # ==================== COMPONENTS ====================

    def create_stock_authority(self, db: AsyncSession) -> StockAuthority:
        """Create StockAuthority with dependencies."""
        return StockAuthority(
            product_repository=self.create_product_repository(db),
            stock_locks=self._base.stock_locks,
        )

    def create_cart_store(self, db: AsyncSession) -> CartStore:
        """Create CartStore with dependencies."""
        return CartStore(
            cart_line_repository=self.create_cart_line_repository(db),
            stock_authority=self.create_stock_authority(db),
            config=self._base.commerce_config,
            cart_locks=self._base.cart_locks,
        )

    def create_payment_ledger(self, db: AsyncSession) -> PaymentLedger:
        """Create PaymentLedger with dependencies."""
        return PaymentLedger(
            payment_repository=self.create_payment_repository(db),
            config=self._base.commerce_config,
            settlement_gateway=self._base.get_settlement_gateway(),
            order_locks=self._base.order_locks,
        )
