# ============================================================================
# SCOPE: GLOBAL
# Description: Base container holding process-wide singletons (settings,
#              commerce limits, lock registries, settlement gateway).
# ============================================================================
"""
Base Container - Shared Singletons.

Single Responsibility: Own the resources that must be shared by every request
of the process. Lock registries in particular only serialize work if every
request sees the same instance.
"""

import logging

from app.config.settings import Settings, get_settings
from app.core.shared import KeyedLock
from app.domains.commerce.domain.services import SettlementGateway, SimulatedSettlementGateway
from app.domains.commerce.domain.value_objects import CommerceConfig

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        settlement_gateway: SettlementGateway | None = None,
    ):
        """
        Initialize base container.

        Args:
            settings: Application settings (uses the cached settings if omitted)
            settlement_gateway: Settlement strategy override
        """
        self.settings = settings or get_settings()
        self.commerce_config = CommerceConfig.from_settings(self.settings)

        self.cart_locks = KeyedLock("cart")
        self.order_locks = KeyedLock("payment")
        self.stock_locks = KeyedLock("stock")

        self._settlement_gateway = settlement_gateway

        logger.info("BaseContainer initialized")

    def get_settlement_gateway(self) -> SettlementGateway:
        """
        Get the settlement gateway (singleton).

        Defaults to the simulated gateway using the configured success rate.
        """
        if self._settlement_gateway is None:
            rate = self.commerce_config.settlement_success_rate
            logger.info(f"Creating SimulatedSettlementGateway (success rate {rate})")
            self._settlement_gateway = SimulatedSettlementGateway(success_rate=rate)
        return self._settlement_gateway

    def get_config(self) -> dict:
        """Get current configuration."""
        return {
            "cart_max_items": self.commerce_config.cart_max_items,
            "enforce_cart_max_items": self.commerce_config.enforce_cart_max_items,
            "payment_max_amount": str(self.commerce_config.payment_max_amount),
            "settlement_success_rate": self.commerce_config.settlement_success_rate,
            "default_currency": self.commerce_config.default_currency,
        }
