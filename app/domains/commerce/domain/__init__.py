"""
Commerce Domain Layer

Domain model of the transactional commerce core.

This module contains:
- Entities: Product (stock record), CartLine, Payment
- Value Objects: Price, PaymentStatus, CommerceConfig
- Domain Services: settlement gateways
- Exceptions: typed outcomes of stock, cart and payment operations
"""

from app.domains.commerce.domain.entities import CartLine, Payment, Product
from app.domains.commerce.domain.services import (
    FixedSettlementGateway,
    SettlementGateway,
    SettlementResult,
    SimulatedSettlementGateway,
)
from app.domains.commerce.domain.value_objects import CommerceConfig, PaymentStatus, Price

__all__ = [
    # Entities
    "CartLine",
    "Payment",
    "Product",
    # Value Objects
    "CommerceConfig",
    "PaymentStatus",
    "Price",
    # Services
    "FixedSettlementGateway",
    "SettlementGateway",
    "SettlementResult",
    "SimulatedSettlementGateway",
]
