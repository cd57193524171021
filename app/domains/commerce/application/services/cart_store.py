"""
Cart Store

Per-user shopping carts. Adding a product that already has an active line
merges into that line; removal and clearing are soft deletes. Every mutation
of a user's cart runs under that user's lock, so the read-check-write steps
(merge detection, stock re-validation, cart cap) cannot interleave.
"""

import logging
from decimal import Decimal

from app.core.domain import InsufficientStockException
from app.core.shared import KeyedLock
from app.domains.commerce.application.dto import CartLineDTO, ClearCartResult
from app.domains.commerce.application.ports import ICartLineRepository
from app.domains.commerce.application.services.stock_authority import StockAuthority, require_positive_quantity
from app.domains.commerce.domain.entities import CartLine
from app.domains.commerce.domain.exceptions import (
    CartLimitExceededException,
    CartLineNotFoundException,
    CartLineNotOwnedException,
    InactiveCartLineException,
)
from app.domains.commerce.domain.value_objects import CommerceConfig

logger = logging.getLogger(__name__)


class CartStore:
    """
    Shopping cart operations scoped to a user.

    Example:
        ```python
        cart = CartStore(cart_line_repository, stock_authority, CommerceConfig())
        line = await cart.add_line(user_id=1, product_id=10, quantity=2)
        await cart.update_quantity(user_id=1, line_id=line.id, new_quantity=3)
        ```
    """

    def __init__(
        self,
        cart_line_repository: ICartLineRepository,
        stock_authority: StockAuthority,
        config: CommerceConfig | None = None,
        cart_locks: KeyedLock | None = None,
    ):
        """
        Initialize the cart store.

        Args:
            cart_line_repository: Cart line persistence
            stock_authority: Source of product snapshots and availability
            config: Cart limits
            cart_locks: Per-user serialization of cart mutations
        """
        self.line_repo = cart_line_repository
        self.stock = stock_authority
        self.config = config or CommerceConfig()
        self._locks = cart_locks or KeyedLock("cart")

    # ==================== Mutations ====================

    async def add_line(self, user_id: int, product_id: int, quantity: int) -> CartLineDTO:
        """
        Add a product to the cart, merging with an existing active line.

        Args:
            user_id: Owner of the cart
            product_id: Product to add
            quantity: Units to add, must be positive

        Returns:
            The created or merged line

        Raises:
            ValidationException: If quantity is not positive
            ProductNotFoundException: If the product is absent or inactive
            InsufficientStockException: If stock cannot cover the resulting quantity
            CartLimitExceededException: If the cart cap is enforced and reached
        """
        require_positive_quantity(quantity)

        async with self._locks.hold(user_id):
            product = await self.stock.get_product(product_id)
            existing = await self.line_repo.find_active(user_id, product_id)
            required = quantity + existing.quantity if existing else quantity

            if not await self.stock.has_sufficient_stock(product_id, required):
                logger.warning(
                    f"Rejected add of product {product_id} for user {user_id}: "
                    f"requested {required}, available {product.quantity}"
                )
                raise InsufficientStockException(product_id, required, product.quantity)

            if existing:
                existing.change_quantity(required)
                line = await self.line_repo.update(existing)
                logger.info(f"Merged product {product_id} into cart line {line.id} of user {user_id}, qty {required}")
                return CartLineDTO.from_entity(line)

            await self._ensure_capacity(user_id)
            line = await self.line_repo.create(CartLine.for_product(user_id, product, quantity))
            logger.info(f"Created cart line {line.id} for user {user_id}, product {product_id}, qty {quantity}")
            return CartLineDTO.from_entity(line)

    async def update_quantity(self, user_id: int, line_id: int, new_quantity: int) -> CartLineDTO:
        """
        Replace the quantity of a cart line.

        Raises:
            ValidationException: If new_quantity is not positive
            CartLineNotFoundException: If the line does not exist
            CartLineNotOwnedException: If the line belongs to another user
            InactiveCartLineException: If the line was removed
            InsufficientStockException: If stock cannot cover new_quantity
        """
        require_positive_quantity(new_quantity)

        async with self._locks.hold(user_id):
            line = await self._get_owned_line(user_id, line_id)
            if not line.is_active:
                raise InactiveCartLineException(line_id, operation="update")

            if not await self.stock.has_sufficient_stock(line.product_id, new_quantity):
                available = await self.stock.available_quantity(line.product_id)
                logger.warning(
                    f"Rejected update of cart line {line_id}: requested {new_quantity}, available {available}"
                )
                raise InsufficientStockException(line.product_id, new_quantity, available)

            line.change_quantity(new_quantity)
            line = await self.line_repo.update(line)

        logger.info(f"Updated cart line {line_id} of user {user_id} to qty {new_quantity}")
        return CartLineDTO.from_entity(line)

    async def remove_line(self, user_id: int, line_id: int) -> bool:
        """
        Soft-delete a cart line. Removing an already removed line marks it
        inactive again.

        Raises:
            CartLineNotFoundException: If the line does not exist
            CartLineNotOwnedException: If the line belongs to another user
        """
        async with self._locks.hold(user_id):
            line = await self._get_owned_line(user_id, line_id)
            line.soft_delete()
            await self.line_repo.update(line)

        logger.info(f"Removed cart line {line_id} of user {user_id}")
        return True

    async def clear_cart(self, user_id: int) -> ClearCartResult:
        """Soft-delete every active line of the user. Always succeeds."""
        async with self._locks.hold(user_id):
            cleared = await self.line_repo.deactivate_all(user_id)

        logger.info(f"Cleared cart of user {user_id}: {cleared} lines")
        return ClearCartResult(success=True, cleared_lines=cleared)

    # ==================== Queries ====================

    async def list_lines(self, user_id: int) -> list[CartLineDTO]:
        """Active lines of the user, newest first."""
        lines = await self.line_repo.list_active(user_id)
        return [CartLineDTO.from_entity(line) for line in lines]

    async def get_line(self, user_id: int, line_id: int) -> CartLineDTO:
        """
        Get one active line of the user.

        Raises:
            CartLineNotFoundException: If the line does not exist
            CartLineNotOwnedException: If the line belongs to another user
            InactiveCartLineException: If the line was removed
        """
        line = await self._get_owned_line(user_id, line_id)
        if not line.is_active:
            raise InactiveCartLineException(line_id, operation="read")
        return CartLineDTO.from_entity(line)

    async def total(self, user_id: int) -> Decimal:
        """Sum of the active line totals, zero for an empty cart."""
        return await self.line_repo.sum_active_totals(user_id)

    async def count(self, user_id: int) -> int:
        """Number of active lines."""
        return await self.line_repo.count_active(user_id)

    async def contains_product(self, user_id: int, product_id: int) -> bool:
        return await self.line_repo.find_active(user_id, product_id) is not None

    # ==================== Helpers ====================

    async def _get_owned_line(self, user_id: int, line_id: int) -> CartLine:
        line = await self.line_repo.get_by_id(line_id)
        if line is None:
            raise CartLineNotFoundException(line_id)
        if not line.belongs_to(user_id):
            logger.warning(f"User {user_id} attempted to access cart line {line_id} of user {line.user_id}")
            raise CartLineNotOwnedException(line_id, user_id)
        return line

    async def _ensure_capacity(self, user_id: int) -> None:
        if not self.config.enforce_cart_max_items:
            return
        if await self.line_repo.count_active(user_id) >= self.config.cart_max_items:
            raise CartLimitExceededException(user_id, self.config.cart_max_items)
