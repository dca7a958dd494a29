from datetime import datetime
from typing import Annotated, AsyncGenerator, List, Optional

import strawberry
from strawberry.types import Info

from storefront.database.dependencies import PRODUCTS_PATH
from storefront.graphql.common import build_dto
from storefront.models.enums import ProductSortField, SortOrder
from storefront.models.schemas.product import (
    Product,
    ProductCreate,
    ProductQueryParams,
    ProductUpdate,
)
from storefront.services.product import DEFAULT_SEARCH_FIELDS, ProductService

ProductSortFieldEnum = strawberry.enum(ProductSortField, name="ProductSortField")
SortOrderEnum = strawberry.enum(SortOrder, name="SortOrder")


@strawberry.type(name="Product")
class ProductType:
    id: int
    name: str
    description: Optional[str]
    price: float
    category: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_schema(cls, product: Product) -> "ProductType":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


@strawberry.type(name="DeletedProduct")
class DeletedProductType:
    id: int


@strawberry.input
class CreateProductInput:
    name: str
    price: float
    category: str
    description: Optional[str] = strawberry.UNSET


@strawberry.input
class UpdateProductInput:
    name: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    price: Optional[float] = strawberry.UNSET
    category: Optional[str] = strawberry.UNSET


@strawberry.input
class ProductSubscriptionFilter:
    categories: Optional[List[str]] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    # accepted but not enforced: there is no authorization layer
    user_id: Optional[str] = None


def matches_product_filter(product: Product, filter: Optional[ProductSubscriptionFilter]) -> bool:
    if filter is None:
        return True
    if filter.categories:
        categories = {category.strip().lower() for category in filter.categories}
        if product.category not in categories:
            return False
    if filter.min_price is not None and product.price < filter.min_price:
        return False
    if filter.max_price is not None and product.price > filter.max_price:
        return False
    return True


FilterArgument = Annotated[
    Optional[ProductSubscriptionFilter],
    strawberry.argument(name="filter", description="Optional filter for subscription events"),
]


def _service(info: Info) -> ProductService:
    return info.context["product_service"]


@strawberry.type
class ProductQuery:
    @strawberry.field(description="Get all products with optional filtering, sorting and pagination")
    async def products(
        self,
        info: Info,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        search: Optional[str] = None,
        name: Optional[str] = None,
        sort_by: Optional[ProductSortFieldEnum] = None,
        sort_order: Optional[SortOrderEnum] = None,
        page: Optional[int] = 1,
        limit: Optional[int] = 10,
    ) -> List[ProductType]:
        params = ProductQueryParams(
            category=category.strip().lower() if category else None,
            min_price=min_price,
            max_price=max_price,
            search=search,
            name=name,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
        response = await _service(info).find_all(params, PRODUCTS_PATH)
        return [ProductType.from_schema(product) for product in response.data]

    @strawberry.field(description="Get a product by ID")
    async def product(self, info: Info, id: int) -> ProductType:
        response = await _service(info).find_one(id, PRODUCTS_PATH)
        return ProductType.from_schema(response.data)

    @strawberry.field(description="Search products by text")
    async def search_products(
        self, info: Info, query: str, fields: Optional[List[str]] = None
    ) -> List[ProductType]:
        response = await _service(info).search(
            query, fields or DEFAULT_SEARCH_FIELDS, PRODUCTS_PATH
        )
        return [ProductType.from_schema(product) for product in response.data]

    @strawberry.field(description="Get products by category")
    async def products_by_category(self, info: Info, category: str) -> List[ProductType]:
        response = await _service(info).find_by_category(category, PRODUCTS_PATH)
        return [ProductType.from_schema(product) for product in response.data]

    @strawberry.field(description="Get products within an inclusive price range")
    async def products_by_price_range(
        self, info: Info, min_price: float, max_price: float
    ) -> List[ProductType]:
        response = await _service(info).find_by_price_range(min_price, max_price, PRODUCTS_PATH)
        return [ProductType.from_schema(product) for product in response.data]

    @strawberry.field(description="Get all product categories in use")
    async def product_categories(self, info: Info) -> List[str]:
        response = await _service(info).get_categories(PRODUCTS_PATH)
        return response.data


@strawberry.type
class ProductMutation:
    @strawberry.mutation(description="Create a new product")
    async def create_product(self, info: Info, input: CreateProductInput) -> ProductType:
        response = await _service(info).create(build_dto(ProductCreate, input), PRODUCTS_PATH)
        return ProductType.from_schema(response.data)

    @strawberry.mutation(description="Update an existing product")
    async def update_product(self, info: Info, id: int, input: UpdateProductInput) -> ProductType:
        response = await _service(info).update(id, build_dto(ProductUpdate, input), PRODUCTS_PATH)
        return ProductType.from_schema(response.data)

    @strawberry.mutation(description="Delete a product")
    async def delete_product(self, info: Info, id: int) -> bool:
        await _service(info).remove(id, PRODUCTS_PATH)
        return True


@strawberry.type
class ProductSubscription:
    @strawberry.subscription(description="Product creation events")
    async def product_created(
        self, info: Info, filter_: FilterArgument = None
    ) -> AsyncGenerator[ProductType, None]:
        subscription = _service(info).subscribe_to_product_created()
        try:
            async for product in subscription:
                if matches_product_filter(product, filter_):
                    yield ProductType.from_schema(product)
        finally:
            subscription.close()

    @strawberry.subscription(description="Product update events")
    async def product_updated(
        self, info: Info, filter_: FilterArgument = None
    ) -> AsyncGenerator[ProductType, None]:
        subscription = _service(info).subscribe_to_product_updated()
        try:
            async for product in subscription:
                if matches_product_filter(product, filter_):
                    yield ProductType.from_schema(product)
        finally:
            subscription.close()

    @strawberry.subscription(description="Product deletion events; only the id is delivered")
    async def product_deleted(
        self, info: Info, filter_: FilterArgument = None
    ) -> AsyncGenerator[DeletedProductType, None]:
        subscription = _service(info).subscribe_to_product_deleted()
        try:
            async for deleted in subscription:
                yield DeletedProductType(id=deleted.id)
        finally:
            subscription.close()
