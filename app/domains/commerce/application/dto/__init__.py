"""
Commerce Application DTOs

Read-facing views returned by the stock, cart and payment components.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.domains.commerce.domain.entities import CartLine, Payment, Product

# ==================== Product DTOs ====================


@dataclass
class ProductDTO:
    """Product data transfer object"""

    id: int
    name: str
    price: Decimal
    quantity: int
    is_active: bool
    sku: str | None = None
    description: str | None = None
    category: str | None = None
    brand: str | None = None
    model: str | None = None
    last_stock_update: datetime | None = None

    @classmethod
    def from_entity(cls, product: Product) -> "ProductDTO":
        return cls(
            id=product.id or 0,
            name=product.name,
            price=product.price.amount,
            quantity=product.quantity,
            is_active=product.is_active,
            sku=product.sku,
            description=product.description,
            category=product.category,
            brand=product.brand,
            model=product.model,
            last_stock_update=product.last_stock_update,
        )


@dataclass
class RegisterProductRequest:
    """Request to register a product with its initial stock"""

    name: str
    price: Decimal
    quantity: int = 0
    sku: str | None = None
    description: str | None = None
    category: str | None = None
    brand: str | None = None
    model: str | None = None


# ==================== Cart DTOs ====================


@dataclass
class CartLineDTO:
    """Cart line data transfer object"""

    id: int
    user_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    product_name: str | None
    product_sku: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, line: CartLine) -> "CartLineDTO":
        return cls(
            id=line.id or 0,
            user_id=line.user_id,
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=line.unit_price.amount,
            total_price=line.total_price.amount,
            product_name=line.product_name,
            product_sku=line.product_sku,
            is_active=line.is_active,
            created_at=line.created_at,
            updated_at=line.updated_at,
        )


@dataclass
class ClearCartResult:
    """Outcome of clearing a cart"""

    success: bool
    cleared_lines: int


# ==================== Payment DTOs ====================


@dataclass
class PaymentDTO:
    """Payment data transfer object"""

    id: int
    order_id: int
    user_id: int | None
    amount: Decimal
    currency: str
    status: str
    transaction_id: str
    payment_method: str | None
    description: str | None
    failure_reason: str | None
    created_at: datetime
    updated_at: datetime
    processed_at: datetime | None

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentDTO":
        return cls(
            id=payment.id or 0,
            order_id=payment.order_id,
            user_id=payment.user_id,
            amount=payment.amount,
            currency=payment.currency,
            status=payment.status.value,
            transaction_id=payment.transaction_id,
            payment_method=payment.payment_method,
            description=payment.description,
            failure_reason=payment.failure_reason,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
            processed_at=payment.processed_at,
        )


@dataclass
class PaymentStatistics:
    """Counts by status and the sum of completed amounts"""

    total_payments: int
    pending_payments: int
    completed_payments: int
    failed_payments: int
    total_completed_amount: Decimal


__all__ = [
    "ProductDTO",
    "RegisterProductRequest",
    "CartLineDTO",
    "ClearCartResult",
    "PaymentDTO",
    "PaymentStatistics",
]
