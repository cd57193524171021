"""
Product Entity

Stock record owned by the stock authority.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.core.domain import AggregateRoot, InsufficientStockException, ValidationException, utc_now

from ..value_objects.price import Price


@dataclass
class Product(AggregateRoot[int]):
    """
    Product aggregate.

    Invariants:
    - quantity is never negative
    - price is strictly positive
    - an inactive product cannot satisfy any stock request

    Example:
        ```python
        product = Product(name="Laptop ROG", price=Price(Decimal("1500.00")), quantity=50)
        product.has_sufficient_stock(2)  # True
        product.reduce_stock(2)
        ```
    """

    name: str = ""
    description: str | None = None
    sku: str | None = None
    category: str | None = None
    brand: str | None = None
    model: str | None = None
    price: Price = field(default_factory=Price.zero)
    quantity: int = 0
    is_active: bool = True
    last_stock_update: datetime | None = None

    def __post_init__(self):
        if self.quantity < 0:
            raise ValidationException("Product quantity cannot be negative", field="quantity")
        if not self.price.is_positive():
            raise ValidationException("Product price must be greater than zero", field="price")

    # Stock queries

    def has_sufficient_stock(self, requested: int) -> bool:
        """Check whether an active product can cover ``requested`` units."""
        return self.is_active and self.quantity >= requested

    # Stock mutations

    def reduce_stock(self, quantity: int) -> None:
        """
        Take units out of stock.

        Raises:
            InsufficientStockException: If the result would be negative
        """
        if self.quantity < quantity:
            raise InsufficientStockException(
                product_id=self.id or 0,
                requested=quantity,
                available=self.quantity,
            )
        self.quantity -= quantity
        self._stock_changed()

    def increase_stock(self, quantity: int) -> None:
        """Add units to stock. Non-positive deltas are ignored."""
        if quantity <= 0:
            return
        self.quantity += quantity
        self._stock_changed()

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()

    def _stock_changed(self) -> None:
        self.last_stock_update = utc_now()
        self.touch()
