"""
Product Repository Implementation

SQLAlchemy implementation of IProductRepository.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.commerce.application.ports import IProductRepository
from app.domains.commerce.domain.entities import Product
from app.domains.commerce.domain.value_objects import Price
from app.models.db import ProductModel, ensure_utc

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository(IProductRepository):
    """
    SQLAlchemy implementation of product repository.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get product by ID."""
        try:
            result = await self.session.execute(
                select(ProductModel)
                .where(ProductModel.id == product_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Error getting product by ID {product_id}: {e}")
            raise

    async def create(self, product: Product) -> Product:
        """Create a new product."""
        model = self._to_model(product)
        self.session.add(model)
        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def update(self, product: Product) -> Product:
        """Update stock and catalog fields of an existing product."""
        result = await self.session.execute(select(ProductModel).where(ProductModel.id == product.id))
        model = result.scalar_one()

        model.name = product.name
        model.description = product.description
        model.sku = product.sku
        model.category = product.category
        model.brand = product.brand
        model.model = product.model
        model.price = product.price.amount
        model.quantity = product.quantity
        model.is_active = product.is_active
        model.last_stock_update = product.last_stock_update

        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    # Mapping methods

    def _to_entity(self, model: ProductModel) -> Product:
        """Convert model to entity."""
        return Product(
            id=model.id,
            name=model.name,
            description=model.description,
            sku=model.sku,
            category=model.category,
            brand=model.brand,
            model=model.model,
            price=Price(Decimal(str(model.price))),
            quantity=model.quantity,
            is_active=model.is_active,
            last_stock_update=ensure_utc(model.last_stock_update),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    def _to_model(self, product: Product) -> ProductModel:
        """Convert entity to model."""
        return ProductModel(
            name=product.name,
            description=product.description,
            sku=product.sku,
            category=product.category,
            brand=product.brand,
            model=product.model,
            price=product.price.amount,
            quantity=product.quantity,
            is_active=product.is_active,
            last_stock_update=product.last_stock_update,
        )
