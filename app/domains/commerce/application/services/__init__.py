"""
Commerce Application Services

The three components of the commerce core.
"""

from app.domains.commerce.application.services.cart_store import CartStore
from app.domains.commerce.application.services.payment_ledger import PaymentLedger
from app.domains.commerce.application.services.stock_authority import StockAuthority

__all__ = [
    "CartStore",
    "PaymentLedger",
    "StockAuthority",
]
