import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config.settings import Settings, get_settings
from app.models.db import Base

logger = logging.getLogger(__name__)

settings = get_settings()


def get_engine_options(config: Settings) -> dict[str, Any]:
    """Engine keyword arguments for the configured backend and environment"""
    base_config: dict[str, Any] = {
        "echo": config.DB_ECHO,
        "future": True,
    }

    if config.is_sqlite:
        # SQLite manages its own connections; pool sizing does not apply
        return base_config

    base_config["pool_pre_ping"] = True
    if config.DEBUG:
        logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
        return {**base_config, "poolclass": NullPool}

    logger.info("Creating async database engine for PRODUCTION (pooled)")
    return {
        **base_config,
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": config.DB_MAX_OVERFLOW,
        "pool_recycle": config.DB_POOL_RECYCLE,
        "pool_timeout": config.DB_POOL_TIMEOUT,
    }


def create_async_database_engine(config: Settings | None = None) -> AsyncEngine:
    """Create the async database engine"""
    config = config or settings
    try:
        return create_async_engine(config.DATABASE_URL, **get_engine_options(config))
    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async_engine = create_async_database_engine()

AsyncSessionLocal = create_session_factory(async_engine)


async def init_models(engine: AsyncEngine | None = None) -> None:
    """Create every table registered on the declarative Base"""
    engine = engine or async_engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")


async def dispose_engine(engine: AsyncEngine | None = None) -> None:
    """Close all pooled connections"""
    engine = engine or async_engine
    await engine.dispose()
    logger.info("Database engine disposed")


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a session per request
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_async_db_context():
    """
    Context manager for database work outside a request
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()
