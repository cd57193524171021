"""
Tests for StockAuthority against the SQLAlchemy product repository.
"""

from decimal import Decimal

import pytest

from app.core.domain import InsufficientStockException, ValidationException
from app.domains.commerce.application.dto import RegisterProductRequest
from app.domains.commerce.domain.exceptions import ProductNotFoundException


@pytest.mark.unit
class TestStockAuthority:
    @pytest.mark.asyncio
    async def test_register_product(self, stock_authority):
        product = await stock_authority.register_product(
            RegisterProductRequest(name="Monitor 27", price=Decimal("899.90"), quantity=10, sku="MON-27")
        )

        assert product.id is not None
        assert product.quantity == 10
        assert product.price.amount == Decimal("899.90")
        assert product.is_active

    @pytest.mark.asyncio
    async def test_register_rejects_non_positive_price(self, stock_authority):
        with pytest.raises(ValidationException):
            await stock_authority.register_product(RegisterProductRequest(name="Free", price=Decimal("0")))

    @pytest.mark.asyncio
    async def test_register_rejects_negative_quantity(self, stock_authority):
        with pytest.raises(ValidationException):
            await stock_authority.register_product(
                RegisterProductRequest(name="Broken", price=Decimal("1.00"), quantity=-1)
            )

    @pytest.mark.asyncio
    async def test_get_product(self, stock_authority, laptop):
        product = await stock_authority.get_product(laptop.id)
        assert product.name == "Laptop ROG Strix"

    @pytest.mark.asyncio
    async def test_get_missing_product(self, stock_authority):
        with pytest.raises(ProductNotFoundException):
            await stock_authority.get_product(999)

    @pytest.mark.asyncio
    async def test_get_inactive_product(self, stock_authority, product_repository, laptop):
        laptop.deactivate()
        await product_repository.update(laptop)

        with pytest.raises(ProductNotFoundException):
            await stock_authority.get_product(laptop.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("requested", "expected"), [(1, True), (50, True), (51, False)])
    async def test_has_sufficient_stock(self, stock_authority, laptop, requested, expected):
        assert await stock_authority.has_sufficient_stock(laptop.id, requested) is expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("requested", [0, -3])
    async def test_has_sufficient_stock_rejects_non_positive(self, stock_authority, laptop, requested):
        with pytest.raises(ValidationException):
            await stock_authority.has_sufficient_stock(laptop.id, requested)

    @pytest.mark.asyncio
    async def test_has_sufficient_stock_missing_product(self, stock_authority):
        with pytest.raises(ProductNotFoundException):
            await stock_authority.has_sufficient_stock(999, 1)

    @pytest.mark.asyncio
    async def test_inactive_product_has_no_stock(self, stock_authority, product_repository, laptop):
        laptop.deactivate()
        await product_repository.update(laptop)

        assert await stock_authority.has_sufficient_stock(laptop.id, 1) is False
        assert await stock_authority.available_quantity(laptop.id) == 0

    @pytest.mark.asyncio
    async def test_reduce_stock(self, stock_authority, laptop):
        product = await stock_authority.reduce_stock(laptop.id, 20)

        assert product.quantity == 30
        assert await stock_authority.available_quantity(laptop.id) == 30

    @pytest.mark.asyncio
    async def test_reduce_stock_to_zero(self, stock_authority, laptop):
        product = await stock_authority.reduce_stock(laptop.id, 50)
        assert product.quantity == 0

    @pytest.mark.asyncio
    async def test_reduce_stock_beyond_available_changes_nothing(self, stock_authority, laptop):
        with pytest.raises(InsufficientStockException) as exc_info:
            await stock_authority.reduce_stock(laptop.id, 51)

        assert exc_info.value.available == 50
        assert await stock_authority.available_quantity(laptop.id) == 50

    @pytest.mark.asyncio
    async def test_reduce_stock_rejects_non_positive(self, stock_authority, laptop):
        with pytest.raises(ValidationException):
            await stock_authority.reduce_stock(laptop.id, 0)

    @pytest.mark.asyncio
    async def test_increase_stock(self, stock_authority, laptop):
        product = await stock_authority.increase_stock(laptop.id, 5)
        assert product.quantity == 55

    @pytest.mark.asyncio
    async def test_increase_stock_ignores_non_positive(self, stock_authority, laptop):
        product = await stock_authority.increase_stock(laptop.id, -5)

        assert product.quantity == 50
        assert product.last_stock_update is None
