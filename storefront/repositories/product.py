# repositories/product.py
from typing import Any, List, Optional

from sqlalchemy import or_, select

from storefront.models.database_models import Product
from storefront.models.schemas.query import FilterOptions
from storefront.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    model = Product
    searchable_fields = ("name", "description", "category")
    sortable_fields = {
        "name": "name",
        "price": "price",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }

    def build_conditions(self, filters: Optional[FilterOptions]) -> List[Any]:
        if filters is None:
            return []

        conditions = []
        if filters.category:
            conditions.append(Product.category == filters.category)
        if filters.min_price is not None:
            conditions.append(Product.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Product.price <= filters.max_price)
        if filters.search:
            conditions.append(
                or_(
                    Product.name.icontains(filters.search, autoescape=True),
                    Product.description.icontains(filters.search, autoescape=True),
                    Product.category.icontains(filters.search, autoescape=True),
                )
            )
        if filters.name:
            conditions.append(Product.name.icontains(filters.name, autoescape=True))
        return conditions

    def default_order_by(self) -> List[Any]:
        return [Product.created_at.desc(), Product.id.desc()]

    async def find_by_category(self, category: str) -> List[Product]:
        statement = (
            select(Product)
            .where(Product.category == category)
            .order_by(*self.default_order_by())
        )
        return list(await self._run(self._read, lambda db: db.scalars(statement).all()))

    async def find_by_price_range(self, min_price: float, max_price: float) -> List[Product]:
        statement = (
            select(Product)
            .where(Product.price >= min_price, Product.price <= max_price)
            .order_by(Product.price.asc(), Product.id.asc())
        )
        return list(await self._run(self._read, lambda db: db.scalars(statement).all()))

    async def get_categories(self) -> List[str]:
        statement = select(Product.category).distinct().order_by(Product.category.asc())
        return list(await self._run(self._read, lambda db: db.scalars(statement).all()))
