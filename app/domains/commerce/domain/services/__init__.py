"""
Commerce Domain Services

Domain services that encapsulate logic not owned by a single entity.
"""

from app.domains.commerce.domain.services.settlement import (
    FixedSettlementGateway,
    SettlementGateway,
    SettlementResult,
    SimulatedSettlementGateway,
)

__all__ = [
    "FixedSettlementGateway",
    "SettlementGateway",
    "SettlementResult",
    "SimulatedSettlementGateway",
]
