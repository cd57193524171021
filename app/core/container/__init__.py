# ============================================================================
# SCOPE: GLOBAL
# Description: Main dependency injection container (singleton).
#              Composes the domain sub-containers.
# ============================================================================
"""
Dependency Injection Container.

Centralized container for creating and managing application dependencies.
Wires concrete implementations to the ports the components depend on.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import Settings
from app.domains.commerce.application.services import CartStore, PaymentLedger, StockAuthority
from app.domains.commerce.domain.services import SettlementGateway

from .base import BaseContainer
from .commerce import CommerceContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        settlement_gateway: SettlementGateway | None = None,
    ):
        """
        Initialize container with all domain sub-containers.

        Args:
            settings: Optional settings override
            settlement_gateway: Optional settlement strategy override
        """
        self._base = BaseContainer(settings, settlement_gateway)
        self._commerce = CommerceContainer(self._base)

        logger.info("DependencyContainer initialized")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def commerce_config(self):
        return self._base.commerce_config

    def get_config(self) -> dict:
        """Get current configuration."""
        return self._base.get_config()

    # ============================================================
    # COMMERCE (delegated to CommerceContainer)
    # ============================================================

    def create_product_repository(self, db: AsyncSession):
        return self._commerce.create_product_repository(db)

    def create_cart_line_repository(self, db: AsyncSession):
        return self._commerce.create_cart_line_repository(db)

    def create_payment_repository(self, db: AsyncSession):
        return self._commerce.create_payment_repository(db)

    def create_stock_authority(self, db: AsyncSession) -> StockAuthority:
        return self._commerce.create_stock_authority(db)

    def create_cart_store(self, db: AsyncSession) -> CartStore:
        return self._commerce.create_cart_store(db)

    def create_payment_ledger(self, db: AsyncSession) -> PaymentLedger:
        return self._commerce.create_payment_ledger(db)


# ============================================================
# GLOBAL CONTAINER INSTANCE
# ============================================================

_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """
    Get global container instance (singleton).

    Returns:
        DependencyContainer instance
    """
    global _container

    if _container is None:
        logger.info("Initializing global DependencyContainer")
        _container = DependencyContainer()

    return _container


def set_container(container: DependencyContainer) -> None:
    """Install ``container`` as the global instance (tests, alternative wiring)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset global container instance.

    Useful for testing or reconfiguration.
    """
    global _container
    logger.info("Resetting global DependencyContainer")
    _container = None


__all__ = [
    "DependencyContainer",
    "get_container",
    "set_container",
    "reset_container",
    "BaseContainer",
    "CommerceContainer",
]
