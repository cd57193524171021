"""
Commerce API Schemas

Pydantic schemas for API request/response validation.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# ==================== Catalog ====================


class RegisterProductRequest(BaseModel):
    """Register product request schema."""

    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    quantity: int = Field(default=0, ge=0)
    sku: str | None = Field(default=None, max_length=50)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    brand: str | None = Field(default=None, max_length=100)
    model: str | None = Field(default=None, max_length=100)


class ProductResponse(BaseModel):
    """Product response schema."""

    id: int
    name: str
    description: str | None = None
    sku: str | None = None
    category: str | None = None
    brand: str | None = None
    model: str | None = None
    price: Decimal
    quantity: int
    is_active: bool = True
    last_stock_update: datetime | None = None

    class Config:
        from_attributes = True


class StockAdjustmentRequest(BaseModel):
    quantity: int


class StockCheckResponse(BaseModel):
    product_id: int
    requested_quantity: int
    available_quantity: int
    sufficient: bool


# ==================== Cart ====================


class AddCartLineRequest(BaseModel):
    """Add to cart request schema."""

    product_id: int
    quantity: int = Field(..., ge=1)


class CartLineResponse(BaseModel):
    """Cart line response schema."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    product_name: str | None = None
    product_sku: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CartTotalResponse(BaseModel):
    user_id: int
    total: Decimal
    currency: str


class CartCountResponse(BaseModel):
    user_id: int
    count: int


class ContainsProductResponse(BaseModel):
    user_id: int
    product_id: int
    in_cart: bool


class ClearCartResponse(BaseModel):
    success: bool
    cleared_lines: int

    class Config:
        from_attributes = True


class RemoveCartLineResponse(BaseModel):
    success: bool
    line_id: int


# ==================== Payments ====================


class SettlePaymentRequest(BaseModel):
    """Payment settlement request schema."""

    order_id: int | None = None
    amount: Decimal | None = Field(default=None, decimal_places=2)
    payment_method: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    currency: str | None = Field(default=None, max_length=3)


class PaymentResponse(BaseModel):
    """Payment response schema."""

    id: int
    order_id: int
    user_id: int | None = None
    amount: Decimal
    currency: str
    status: str
    transaction_id: str
    payment_method: str | None = None
    description: str | None = None
    failure_reason: str | None = None
    created_at: datetime
    updated_at: datetime
    processed_at: datetime | None = None

    class Config:
        from_attributes = True


class PaymentStatusResponse(BaseModel):
    payment_id: int
    transaction_id: str
    status: str
    failure_reason: str | None = None
    processed_at: datetime | None = None


class PaymentStatisticsResponse(BaseModel):
    """Payment statistics response schema."""

    total_payments: int
    pending_payments: int
    completed_payments: int
    failed_payments: int
    total_completed_amount: Decimal

    class Config:
        from_attributes = True
