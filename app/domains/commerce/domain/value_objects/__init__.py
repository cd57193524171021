"""
Commerce Domain Value Objects
"""

from .commerce_config import CommerceConfig
from .payment_status import PaymentStatus
from .price import Price

__all__ = [
    "CommerceConfig",
    "PaymentStatus",
    "Price",
]
