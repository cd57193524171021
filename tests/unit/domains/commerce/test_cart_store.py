"""
Tests for CartStore against the SQLAlchemy repositories.

Covers merge-on-add, stock re-validation, snapshots, ownership checks, soft
deletion and the optional cart cap.
"""

from decimal import Decimal

import pytest

from app.core.domain import InsufficientStockException, ValidationException
from app.core.shared import KeyedLock
from app.domains.commerce.application.services import CartStore
from app.domains.commerce.domain.exceptions import (
    CartLimitExceededException,
    CartLineNotFoundException,
    CartLineNotOwnedException,
    InactiveCartLineException,
    ProductNotFoundException,
)
from app.domains.commerce.domain.value_objects import CommerceConfig, Price

USER_ID = 1
OTHER_USER_ID = 2


# ============================================================================
# add_line
# ============================================================================


@pytest.mark.unit
class TestAddLine:
    @pytest.mark.asyncio
    async def test_merges_repeated_adds(self, cart_store, laptop):
        first = await cart_store.add_line(USER_ID, laptop.id, 2)
        assert first.quantity == 2
        assert first.total_price == Decimal("3000.00")

        merged = await cart_store.add_line(USER_ID, laptop.id, 1)

        assert merged.id == first.id
        assert merged.quantity == 3
        assert merged.total_price == Decimal("4500.00")
        assert await cart_store.count(USER_ID) == 1

    @pytest.mark.asyncio
    async def test_insufficient_stock_leaves_line_unchanged(self, cart_store, laptop):
        await cart_store.add_line(USER_ID, laptop.id, 2)
        await cart_store.add_line(USER_ID, laptop.id, 1)

        with pytest.raises(InsufficientStockException) as exc_info:
            await cart_store.add_line(USER_ID, laptop.id, 100)

        assert exc_info.value.requested == 103
        assert exc_info.value.available == 50
        lines = await cart_store.list_lines(USER_ID)
        assert len(lines) == 1
        assert lines[0].quantity == 3

    @pytest.mark.asyncio
    async def test_merge_checks_combined_quantity(self, cart_store, mouse):
        await cart_store.add_line(USER_ID, mouse.id, 3)

        with pytest.raises(InsufficientStockException):
            await cart_store.add_line(USER_ID, mouse.id, 3)

        assert (await cart_store.add_line(USER_ID, mouse.id, 2)).quantity == 5

    @pytest.mark.asyncio
    async def test_stock_is_not_reserved(self, cart_store, stock_authority, mouse):
        await cart_store.add_line(USER_ID, mouse.id, 5)

        assert await stock_authority.available_quantity(mouse.id) == 5
        assert (await cart_store.add_line(OTHER_USER_ID, mouse.id, 5)).quantity == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_rejects_non_positive_quantity(self, cart_store, laptop, quantity):
        with pytest.raises(ValidationException):
            await cart_store.add_line(USER_ID, laptop.id, quantity)
        assert await cart_store.count(USER_ID) == 0

    @pytest.mark.asyncio
    async def test_missing_product(self, cart_store):
        with pytest.raises(ProductNotFoundException):
            await cart_store.add_line(USER_ID, 999, 1)

    @pytest.mark.asyncio
    async def test_inactive_product(self, cart_store, product_repository, laptop):
        laptop.deactivate()
        await product_repository.update(laptop)

        with pytest.raises(ProductNotFoundException):
            await cart_store.add_line(USER_ID, laptop.id, 1)

    @pytest.mark.asyncio
    async def test_snapshot_survives_price_change(self, cart_store, product_repository, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 1)

        laptop.price = Price(Decimal("1200.00"))
        await product_repository.update(laptop)
        merged = await cart_store.add_line(USER_ID, laptop.id, 1)

        assert merged.id == line.id
        assert merged.unit_price == Decimal("1500.00")
        assert merged.total_price == Decimal("3000.00")
        assert merged.product_name == "Laptop ROG Strix"
        assert merged.product_sku == "ROG-G15"

    @pytest.mark.asyncio
    async def test_add_after_remove_creates_new_line(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)
        await cart_store.remove_line(USER_ID, line.id)

        fresh = await cart_store.add_line(USER_ID, laptop.id, 1)

        assert fresh.id != line.id
        assert fresh.quantity == 1


@pytest.mark.unit
class TestCartLimit:
    @pytest.mark.asyncio
    async def test_cap_is_not_enforced_by_default(self, cart_line_repository, stock_authority, laptop, mouse):
        cart = CartStore(cart_line_repository, stock_authority, CommerceConfig(cart_max_items=1))

        await cart.add_line(USER_ID, laptop.id, 1)
        await cart.add_line(USER_ID, mouse.id, 1)

        assert await cart.count(USER_ID) == 2

    @pytest.mark.asyncio
    async def test_enforced_cap_rejects_new_lines(self, cart_line_repository, stock_authority, laptop, mouse):
        config = CommerceConfig(cart_max_items=1, enforce_cart_max_items=True)
        cart = CartStore(cart_line_repository, stock_authority, config, KeyedLock("cart"))
        await cart.add_line(USER_ID, laptop.id, 1)

        with pytest.raises(CartLimitExceededException) as exc_info:
            await cart.add_line(USER_ID, mouse.id, 1)

        assert exc_info.value.limit == 1
        # merging into an existing line does not count against the cap
        assert (await cart.add_line(USER_ID, laptop.id, 1)).quantity == 2


# ============================================================================
# update_quantity / remove_line / clear_cart
# ============================================================================


@pytest.mark.unit
class TestUpdateQuantity:
    @pytest.mark.asyncio
    async def test_replaces_quantity(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)

        updated = await cart_store.update_quantity(USER_ID, line.id, 5)

        assert updated.quantity == 5
        assert updated.total_price == Decimal("7500.00")

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)

        with pytest.raises(InsufficientStockException) as exc_info:
            await cart_store.update_quantity(USER_ID, line.id, 51)

        assert exc_info.value.available == 50
        assert (await cart_store.get_line(USER_ID, line.id)).quantity == 2

    @pytest.mark.asyncio
    async def test_rejects_non_positive_quantity(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)

        with pytest.raises(ValidationException):
            await cart_store.update_quantity(USER_ID, line.id, 0)

    @pytest.mark.asyncio
    async def test_missing_line(self, cart_store):
        with pytest.raises(CartLineNotFoundException):
            await cart_store.update_quantity(USER_ID, 999, 1)

    @pytest.mark.asyncio
    async def test_line_of_other_user(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)

        with pytest.raises(CartLineNotOwnedException):
            await cart_store.update_quantity(OTHER_USER_ID, line.id, 1)

    @pytest.mark.asyncio
    async def test_removed_line(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)
        await cart_store.remove_line(USER_ID, line.id)

        with pytest.raises(InactiveCartLineException):
            await cart_store.update_quantity(USER_ID, line.id, 1)


@pytest.mark.unit
class TestRemoveAndClear:
    @pytest.mark.asyncio
    async def test_remove_hides_line(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)

        assert await cart_store.remove_line(USER_ID, line.id) is True

        assert await cart_store.list_lines(USER_ID) == []
        assert await cart_store.contains_product(USER_ID, laptop.id) is False
        with pytest.raises(InactiveCartLineException):
            await cart_store.get_line(USER_ID, line.id)

    @pytest.mark.asyncio
    async def test_remove_twice_succeeds(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)
        await cart_store.remove_line(USER_ID, line.id)

        assert await cart_store.remove_line(USER_ID, line.id) is True

    @pytest.mark.asyncio
    async def test_remove_line_of_other_user(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 2)

        with pytest.raises(CartLineNotOwnedException):
            await cart_store.remove_line(OTHER_USER_ID, line.id)

        assert await cart_store.count(USER_ID) == 1

    @pytest.mark.asyncio
    async def test_remove_missing_line(self, cart_store):
        with pytest.raises(CartLineNotFoundException):
            await cart_store.remove_line(USER_ID, 999)

    @pytest.mark.asyncio
    async def test_clear_cart(self, cart_store, laptop, mouse):
        await cart_store.add_line(USER_ID, laptop.id, 1)
        await cart_store.add_line(USER_ID, mouse.id, 2)
        await cart_store.add_line(OTHER_USER_ID, mouse.id, 1)

        result = await cart_store.clear_cart(USER_ID)

        assert result.success is True
        assert result.cleared_lines == 2
        assert await cart_store.count(USER_ID) == 0
        assert await cart_store.count(OTHER_USER_ID) == 1

    @pytest.mark.asyncio
    async def test_clear_empty_cart_succeeds(self, cart_store):
        result = await cart_store.clear_cart(USER_ID)

        assert result.success is True
        assert result.cleared_lines == 0


# ============================================================================
# Queries
# ============================================================================


@pytest.mark.unit
class TestCartQueries:
    @pytest.mark.asyncio
    async def test_empty_cart(self, cart_store):
        assert await cart_store.list_lines(USER_ID) == []
        assert await cart_store.total(USER_ID) == Decimal("0.00")
        assert await cart_store.count(USER_ID) == 0

    @pytest.mark.asyncio
    async def test_total_sums_active_lines(self, cart_store, laptop, mouse):
        await cart_store.add_line(USER_ID, laptop.id, 2)
        line = await cart_store.add_line(USER_ID, mouse.id, 2)
        assert await cart_store.total(USER_ID) == Decimal("3099.80")

        await cart_store.remove_line(USER_ID, line.id)

        assert await cart_store.total(USER_ID) == Decimal("3000.00")

    @pytest.mark.asyncio
    async def test_list_lines_newest_first(self, cart_store, laptop, mouse):
        first = await cart_store.add_line(USER_ID, laptop.id, 1)
        second = await cart_store.add_line(USER_ID, mouse.id, 1)

        lines = await cart_store.list_lines(USER_ID)

        assert [line.id for line in lines] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_contains_product(self, cart_store, laptop, mouse):
        await cart_store.add_line(USER_ID, laptop.id, 1)

        assert await cart_store.contains_product(USER_ID, laptop.id) is True
        assert await cart_store.contains_product(USER_ID, mouse.id) is False
        assert await cart_store.contains_product(OTHER_USER_ID, laptop.id) is False

    @pytest.mark.asyncio
    async def test_get_line_of_other_user(self, cart_store, laptop):
        line = await cart_store.add_line(USER_ID, laptop.id, 1)

        with pytest.raises(CartLineNotOwnedException):
            await cart_store.get_line(OTHER_USER_ID, line.id)
