"""
Database access: async engine, session factory and request dependencies.
"""

from app.database.async_db import (
    AsyncSessionLocal,
    async_engine,
    create_async_database_engine,
    create_session_factory,
    dispose_engine,
    get_async_db,
    get_async_db_context,
    init_models,
)

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "create_async_database_engine",
    "create_session_factory",
    "dispose_engine",
    "get_async_db",
    "get_async_db_context",
    "init_models",
]
