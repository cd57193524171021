"""
Commerce Repositories

SQLAlchemy implementations of the commerce ports.
"""

from app.domains.commerce.infrastructure.repositories.cart_line_repository import SQLAlchemyCartLineRepository
from app.domains.commerce.infrastructure.repositories.payment_repository import SQLAlchemyPaymentRepository
from app.domains.commerce.infrastructure.repositories.product_repository import SQLAlchemyProductRepository

__all__ = [
    "SQLAlchemyCartLineRepository",
    "SQLAlchemyPaymentRepository",
    "SQLAlchemyProductRepository",
]
