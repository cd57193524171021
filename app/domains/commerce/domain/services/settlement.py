"""
Settlement Service for the Commerce Domain

Decides the outcome of a settlement attempt. The payment ledger depends only
on the SettlementGateway protocol, so a real payment gateway can replace the
simulated one without changing how payments are recorded.
"""

import logging
import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..entities.payment import SETTLEMENT_FAILURE_REASON, Payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of one settlement attempt."""

    approved: bool
    failure_reason: str | None = None

    @classmethod
    def success(cls) -> "SettlementResult":
        return cls(approved=True)

    @classmethod
    def failure(cls, reason: str = SETTLEMENT_FAILURE_REASON) -> "SettlementResult":
        return cls(approved=False, failure_reason=reason)


@runtime_checkable
class SettlementGateway(Protocol):
    """Interface of anything able to settle a pending payment."""

    async def settle(self, payment: Payment) -> SettlementResult:
        """Attempt to settle ``payment`` and report the outcome"""
        ...


class SimulatedSettlementGateway:
    """
    Probabilistic stand-in for a payment processor.

    Approves a payment when a draw from ``rng`` falls below ``success_rate``.

    Example:
        ```python
        gateway = SimulatedSettlementGateway(success_rate=0.9, rng=random.Random(42))
        result = await gateway.settle(payment)
        ```
    """

    def __init__(self, success_rate: float = 0.9, rng: random.Random | None = None):
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be between 0 and 1")
        self.success_rate = success_rate
        self._rng = rng or random.Random()

    async def settle(self, payment: Payment) -> SettlementResult:
        draw = self._rng.random()
        if draw < self.success_rate:
            return SettlementResult.success()
        logger.info(f"Simulated settlement declined transaction {payment.transaction_id}")
        return SettlementResult.failure()


class FixedSettlementGateway:
    """Gateway that always returns the same outcome. Useful for demos and tests."""

    def __init__(self, approve: bool = True, failure_reason: str = SETTLEMENT_FAILURE_REASON):
        self.approve = approve
        self.failure_reason = failure_reason
        self.settled: list[str] = []

    async def settle(self, payment: Payment) -> SettlementResult:
        self.settled.append(payment.transaction_id)
        if self.approve:
            return SettlementResult.success()
        return SettlementResult.failure(self.failure_reason)
