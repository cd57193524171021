"""
Cart Line Entity

One (user, product) entry of a shopping cart.
"""

from dataclasses import dataclass, field

from app.core.domain import SoftDeletableEntity, ValidationException

from ..value_objects.price import Price
from .product import Product


@dataclass
class CartLine(SoftDeletableEntity[int]):
    """
    Cart line with snapshotted product data.

    The unit price, name and SKU are copied from the product when the line is
    created and are not re-read afterwards, so later catalog price changes do
    not alter what the cart shows. ``total_price`` is derived from the unit
    price and the quantity every time either changes.

    Example:
        ```python
        line = CartLine.for_product(user_id=1, product=product, quantity=2)
        line.change_quantity(3)
        line.total_price.amount  # unit price x 3
        ```
    """

    user_id: int = 0
    product_id: int = 0
    quantity: int = 1
    unit_price: Price = field(default_factory=Price.zero)
    product_name: str | None = None
    product_sku: str | None = None
    total_price: Price = field(default_factory=Price.zero)

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValidationException("Cart line quantity must be greater than zero", field="quantity")
        self._recalculate_total()

    @classmethod
    def for_product(cls, user_id: int, product: Product, quantity: int) -> "CartLine":
        """Create a new line snapshotting the product's current price and identity."""
        return cls(
            user_id=user_id,
            product_id=product.id or 0,
            quantity=quantity,
            unit_price=product.price,
            product_name=product.name,
            product_sku=product.sku,
        )

    def change_quantity(self, new_quantity: int) -> None:
        """Set the quantity and recompute the total."""
        if new_quantity <= 0:
            raise ValidationException("Cart line quantity must be greater than zero", field="quantity")
        self.quantity = new_quantity
        self._recalculate_total()
        self.touch()

    def belongs_to(self, user_id: int) -> bool:
        return self.user_id == user_id

    def _recalculate_total(self) -> None:
        self.total_price = self.unit_price.multiply(self.quantity)
