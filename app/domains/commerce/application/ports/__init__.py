"""
Commerce Application Ports

Interface definitions (ports) for the commerce domain.
Uses Protocol for structural typing.
"""

from decimal import Decimal
from typing import Protocol, runtime_checkable

from app.domains.commerce.domain.entities import CartLine, Payment, Product
from app.domains.commerce.domain.value_objects import PaymentStatus


@runtime_checkable
class IProductRepository(Protocol):
    """
    Interface for product repository.

    Returns products regardless of their active flag; callers decide how
    inactive products are treated.
    """

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get product by ID"""
        ...

    async def create(self, product: Product) -> Product:
        """Persist a new product"""
        ...

    async def update(self, product: Product) -> Product:
        """Persist changes of an existing product"""
        ...


@runtime_checkable
class ICartLineRepository(Protocol):
    """
    Interface for cart line repository.
    """

    async def get_by_id(self, line_id: int) -> CartLine | None:
        """Get a line by ID, active or not"""
        ...

    async def find_active(self, user_id: int, product_id: int) -> CartLine | None:
        """Get the active line of a user for a product"""
        ...

    async def list_active(self, user_id: int) -> list[CartLine]:
        """Active lines of a user, newest first"""
        ...

    async def count_active(self, user_id: int) -> int:
        """Count active lines of a user"""
        ...

    async def sum_active_totals(self, user_id: int) -> Decimal:
        """Sum of the totals of a user's active lines"""
        ...

    async def create(self, line: CartLine) -> CartLine:
        """Persist a new line"""
        ...

    async def update(self, line: CartLine) -> CartLine:
        """Persist changes of an existing line"""
        ...

    async def deactivate_all(self, user_id: int) -> int:
        """Soft-delete every active line of a user, returning how many changed"""
        ...


@runtime_checkable
class IPaymentRepository(Protocol):
    """
    Interface for payment repository.
    """

    async def create(self, payment: Payment) -> Payment:
        """Persist a new payment"""
        ...

    async def update(self, payment: Payment) -> Payment:
        """Persist changes of an existing payment"""
        ...

    async def get_by_id(self, payment_id: int) -> Payment | None:
        """Get payment by ID"""
        ...

    async def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        """Get payment by transaction id"""
        ...

    async def exists_for_order(self, order_id: int) -> bool:
        """Whether any payment exists for the order"""
        ...

    async def list_by_user(self, user_id: int) -> list[Payment]:
        """Payments of a user, newest first"""
        ...

    async def list_by_order(self, order_id: int) -> list[Payment]:
        """Payments of an order"""
        ...

    async def list_by_status(self, status: PaymentStatus) -> list[Payment]:
        """Payments in a status, newest first"""
        ...

    async def list_pending(self) -> list[Payment]:
        """Pending payments, oldest first"""
        ...

    async def count_by_status(self) -> dict[PaymentStatus, int]:
        """Number of payments per status"""
        ...

    async def sum_amount(self, status: PaymentStatus) -> Decimal:
        """Sum of amounts of payments in a status"""
        ...


__all__ = [
    "IProductRepository",
    "ICartLineRepository",
    "IPaymentRepository",
]
