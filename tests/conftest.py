"""
Shared pytest fixtures for all tests.

This module provides the database engine and sessions, the commerce
components wired on top of them, a deterministic settlement gateway and
seeded products.
"""

import os
from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure test environment before the application modules read settings
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.pop("SENTRY_DSN", None)

from app.core.shared import KeyedLock  # noqa: E402
from app.database.async_db import create_session_factory  # noqa: E402
from app.domains.commerce.application.dto import RegisterProductRequest  # noqa: E402
from app.domains.commerce.application.services import CartStore, PaymentLedger, StockAuthority  # noqa: E402
from app.domains.commerce.domain.entities import Product  # noqa: E402
from app.domains.commerce.domain.services import FixedSettlementGateway  # noqa: E402
from app.domains.commerce.domain.value_objects import CommerceConfig  # noqa: E402
from app.domains.commerce.infrastructure.repositories import (  # noqa: E402
    SQLAlchemyCartLineRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyProductRepository,
)
from app.models.db import Base  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


async def _create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest_asyncio.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared by every session of a test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await _create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def file_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    File-backed SQLite engine.

    Unlike the in-memory engine every session gets its own connection, which
    is what concurrent request handling looks like.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'commerce.db'}")
    await _create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def async_session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory."""
    return create_session_factory(async_engine)


@pytest_asyncio.fixture
async def db_session(async_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test."""
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def mock_async_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


# ============================================================================
# COMMERCE FIXTURES
# ============================================================================


@pytest.fixture
def commerce_config() -> CommerceConfig:
    return CommerceConfig()


@pytest.fixture
def settlement_gateway() -> FixedSettlementGateway:
    """Gateway approving every settlement."""
    return FixedSettlementGateway(approve=True)


@pytest.fixture
def product_repository(db_session) -> SQLAlchemyProductRepository:
    return SQLAlchemyProductRepository(db_session)


@pytest.fixture
def cart_line_repository(db_session) -> SQLAlchemyCartLineRepository:
    return SQLAlchemyCartLineRepository(db_session)


@pytest.fixture
def payment_repository(db_session) -> SQLAlchemyPaymentRepository:
    return SQLAlchemyPaymentRepository(db_session)


@pytest.fixture
def stock_authority(product_repository) -> StockAuthority:
    return StockAuthority(product_repository, KeyedLock("stock"))


@pytest.fixture
def cart_store(cart_line_repository, stock_authority, commerce_config) -> CartStore:
    return CartStore(cart_line_repository, stock_authority, commerce_config, KeyedLock("cart"))


@pytest.fixture
def payment_ledger(payment_repository, commerce_config, settlement_gateway) -> PaymentLedger:
    return PaymentLedger(payment_repository, commerce_config, settlement_gateway, KeyedLock("payment"))


@pytest_asyncio.fixture
async def laptop(stock_authority) -> Product:
    """Active product with 50 units at 1500.00."""
    return await stock_authority.register_product(
        RegisterProductRequest(
            name="Laptop ROG Strix",
            price=Decimal("1500.00"),
            quantity=50,
            sku="ROG-G15",
            category="laptops",
            brand="ASUS",
        )
    )


@pytest_asyncio.fixture
async def mouse(stock_authority) -> Product:
    """Active product with 5 units at 49.90."""
    return await stock_authority.register_product(
        RegisterProductRequest(name="Mouse G502", price=Decimal("49.90"), quantity=5, sku="G502")
    )
