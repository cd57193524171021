"""
Commerce API Dependencies

FastAPI dependencies for the commerce domain. Components are built per request
on the request's database session; lock registries and the settlement gateway
are shared through the global container.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.container import get_container
from app.database.async_db import get_async_db
from app.domains.commerce.application.services import CartStore, PaymentLedger, StockAuthority
from app.domains.commerce.domain.value_objects import CommerceConfig


def get_stock_authority(db: AsyncSession = Depends(get_async_db)) -> StockAuthority:
    """Get StockAuthority instance."""
    return get_container().create_stock_authority(db)


def get_cart_store(db: AsyncSession = Depends(get_async_db)) -> CartStore:
    """Get CartStore instance."""
    return get_container().create_cart_store(db)


def get_payment_ledger(db: AsyncSession = Depends(get_async_db)) -> PaymentLedger:
    """Get PaymentLedger instance."""
    return get_container().create_payment_ledger(db)


def get_commerce_config() -> CommerceConfig:
    return get_container().commerce_config


__all__ = [
    "get_stock_authority",
    "get_cart_store",
    "get_payment_ledger",
    "get_commerce_config",
]
