"""
Database models package - Organized by responsibility
"""

from .base import Base, TimestampMixin, ensure_utc
from .cart import CartLineModel
from .catalog import ProductModel
from .payments import PaymentModel

__all__ = [
    "Base",
    "TimestampMixin",
    "ensure_utc",
    "ProductModel",
    "CartLineModel",
    "PaymentModel",
]
