"""
Payment Status Value Object

Settlement states of a payment and the transitions allowed on the normal path.
"""

from app.core.domain import StatusEnum


class PaymentStatus(StatusEnum):
    """
    Payment settlement states.

    Normal path:
    - PENDING -> COMPLETED (settlement succeeded)
    - PENDING -> FAILED (settlement failed)
    - COMPLETED, FAILED -> (terminal)

    The administrative status update does not consult these transitions.
    """

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    def can_transition_to(self, new_status: "PaymentStatus") -> bool:
        """Check whether the normal settlement path allows ``new_status``."""
        return new_status in _SETTLEMENT_TRANSITIONS[self]

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) state."""
        return not _SETTLEMENT_TRANSITIONS[self]


_SETTLEMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED}),
    PaymentStatus.COMPLETED: frozenset(),
    PaymentStatus.FAILED: frozenset(),
}
