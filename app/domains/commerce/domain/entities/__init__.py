"""
Commerce Domain Entities
"""

from .cart_line import CartLine
from .payment import Payment, generate_transaction_id
from .product import Product

__all__ = [
    "CartLine",
    "Payment",
    "Product",
    "generate_transaction_id",
]
