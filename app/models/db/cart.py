"""
Cart line model. Lines are soft-deleted through ``is_active`` and kept for audit.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class CartLineModel(Base, TimestampMixin):
    """One (user, product) entry of a shopping cart"""

    __tablename__ = "cart_lines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    # Snapshot of the product at add time
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    product_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    product_sku: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_cart_line_quantity_positive"),
        # At most one active line per (user, product)
        Index(
            "uq_cart_lines_active_user_product",
            "user_id",
            "product_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index("idx_cart_lines_user_active", "user_id", "is_active"),
    )

    def __repr__(self):
        return (
            f"<CartLineModel(id={self.id}, user_id={self.user_id}, "
            f"product_id={self.product_id}, quantity={self.quantity}, active={self.is_active})>"
        )
