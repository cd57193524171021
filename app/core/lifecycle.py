"""
Application lifecycle management using the FastAPI lifespan pattern.

This module handles only application startup/shutdown logic.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import Settings, get_settings
from app.database.async_db import dispose_engine, init_models

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Creates the schema on startup and releases pooled connections on shutdown.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize lifecycle manager."""
        self._settings = settings or get_settings()
        self._initialized = False

    async def startup(self) -> None:
        """
        Execute startup tasks.

        Called when the application starts.
        """
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        self._verify_configurations()
        await init_models()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """
        Execute shutdown tasks.

        Called when the application stops.
        """
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")
        await dispose_engine()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Log the commerce limits in effect and flag risky settings."""
        settings = self._settings
        logger.info(
            f"Commerce limits: cart max items={settings.CART_MAX_ITEMS} "
            f"(enforced={settings.CART_ENFORCE_MAX_ITEMS}), "
            f"payment max amount={settings.PAYMENT_MAX_AMOUNT}, "
            f"settlement success rate={settings.PAYMENT_SUCCESS_RATE}"
        )

        if not settings.SENTRY_DSN and not settings.is_development:
            logger.warning("SENTRY_DSN not configured - error reporting is disabled")

        if settings.is_sqlite and not settings.is_development:
            logger.warning("Running on SQLite outside development; configure DATABASE_URL for production")


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()

    await lifecycle.startup()

    yield

    await lifecycle.shutdown()
