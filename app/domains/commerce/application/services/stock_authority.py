"""
Stock Authority

Owns product existence and available-quantity truth. The cart consults it for
availability; stock is only ever changed through the administrative
reduce/increase operations.
"""

import logging

from app.core.domain import ValidationException
from app.core.shared import KeyedLock
from app.domains.commerce.application.dto import RegisterProductRequest
from app.domains.commerce.application.ports import IProductRepository
from app.domains.commerce.domain.entities import Product
from app.domains.commerce.domain.exceptions import ProductNotFoundException
from app.domains.commerce.domain.value_objects import Price

logger = logging.getLogger(__name__)


class StockAuthority:
    """
    Stock queries and administrative stock deltas.

    Inactive products are reported exactly like absent ones by ``get_product``
    and by the mutating operations; ``has_sufficient_stock`` answers False for
    them instead of failing.
    """

    def __init__(self, product_repository: IProductRepository, stock_locks: KeyedLock | None = None):
        """
        Initialize the stock authority.

        Args:
            product_repository: Product persistence
            stock_locks: Per-product serialization of stock deltas
        """
        self.product_repo = product_repository
        self._locks = stock_locks or KeyedLock("stock")

    async def get_product(self, product_id: int) -> Product:
        """
        Get an active product.

        Raises:
            ProductNotFoundException: If the product is absent or inactive
        """
        product = await self.product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            raise ProductNotFoundException(product_id)
        return product

    async def has_sufficient_stock(self, product_id: int, requested_quantity: int) -> bool:
        """
        Check whether a product can cover ``requested_quantity`` units.

        Args:
            product_id: Product to check
            requested_quantity: Units requested, must be positive

        Returns:
            False for inactive products or when stock falls short, True otherwise

        Raises:
            ValidationException: If requested_quantity is not positive
            ProductNotFoundException: If the product does not exist
        """
        require_positive_quantity(requested_quantity)

        product = await self.product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundException(product_id)
        return product.has_sufficient_stock(requested_quantity)

    async def available_quantity(self, product_id: int) -> int:
        """Units a caller could obtain right now; 0 for absent or inactive products."""
        product = await self.product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            return 0
        return product.quantity

    async def reduce_stock(self, product_id: int, quantity: int) -> Product:
        """
        Remove units from stock.

        Raises:
            ValidationException: If quantity is not positive
            ProductNotFoundException: If the product is absent or inactive
            InsufficientStockException: If stock would become negative
        """
        require_positive_quantity(quantity)

        async with self._locks.hold(product_id):
            product = await self.get_product(product_id)
            product.reduce_stock(quantity)
            product = await self.product_repo.update(product)

        logger.info(f"Stock of product {product_id} reduced by {quantity}, now {product.quantity}")
        return product

    async def increase_stock(self, product_id: int, quantity: int) -> Product:
        """
        Add units to stock. A non-positive quantity leaves the product untouched.

        Raises:
            ProductNotFoundException: If the product is absent or inactive
        """
        async with self._locks.hold(product_id):
            product = await self.get_product(product_id)
            if quantity <= 0:
                logger.debug(f"Ignoring non-positive stock increase for product {product_id}: {quantity}")
                return product
            product.increase_stock(quantity)
            product = await self.product_repo.update(product)

        logger.info(f"Stock of product {product_id} increased by {quantity}, now {product.quantity}")
        return product

    async def register_product(self, request: RegisterProductRequest) -> Product:
        """
        Create a product with its initial stock.

        Raises:
            ValidationException: If price or quantity are out of range
        """
        try:
            price = Price(request.price)
        except ValueError as e:
            raise ValidationException(str(e), field="price") from e

        product = Product(
            name=request.name,
            description=request.description,
            sku=request.sku,
            category=request.category,
            brand=request.brand,
            model=request.model,
            price=price,
            quantity=request.quantity,
        )
        product = await self.product_repo.create(product)
        logger.info(f"Registered product {product.id} ({product.name}) with {product.quantity} units")
        return product


def require_positive_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ValidationException("Quantity must be greater than zero", field="quantity")
