# services/product.py
import json
from typing import List, Optional

from fastapi import HTTPException, status
from pydantic.alias_generators import to_camel

from storefront.models.database_models import Product as ProductModel
from storefront.models.enums import ProductEvent
from storefront.models.schemas.product import (
    Product,
    ProductCreate,
    ProductDeleted,
    ProductQueryParams,
    ProductUpdate,
)
from storefront.models.schemas.query import PaginatedResult
from storefront.models.schemas.response import ApiResponse, HATEOASLinks
from storefront.repositories.product import ProductRepository
from storefront.services.base import BaseService
from storefront.services.pubsub import Subscription
from storefront.services.query_builder import build_query_options
from storefront.utils import validation
from storefront.utils.exceptions import NotFoundException, ValidationException
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SEARCH_FIELDS = ["name", "description", "category"]
DUPLICATE_NAME_MESSAGE = "A product with this name already exists"

# accepted spellings in ``fields`` mapped to the camelCase wire key
WIRE_NAMES = {}
for _name in Product.model_fields:
    WIRE_NAMES[_name] = WIRE_NAMES[to_camel(_name)] = to_camel(_name)


class ProductService(BaseService[ProductModel]):
    repository: ProductRepository

    # Links

    def _product_links(self, base_url: str, collection: bool = False, **context) -> HATEOASLinks:
        links = self._links(base_url, **context)
        create_link = self.response_builder.create_link
        links.related["search"] = create_link(f"{base_url}/search/{{query}}", "GET", "search")
        links.related["categories"] = create_link(f"{base_url}/meta/categories", "GET", "categories")
        if collection:
            links.related["filter-by-category"] = create_link(
                f"{base_url}/category/{{category}}", "GET", "filter-by-category"
            )
            links.related["filter-by-price"] = create_link(
                f"{base_url}/price-range/{{minPrice}}/{{maxPrice}}", "GET", "filter-by-price"
            )
        return links

    def _item_links(self, base_url: str, product: Product) -> HATEOASLinks:
        return self._product_links(
            base_url,
            resource_id=product.id,
            resource_state={"category": product.category, "price": product.price},
        )

    # Checks

    @staticmethod
    def _check_id(id: int) -> None:
        error = validation.check_positive_id(id, label="Product ID")
        if error is not None:
            raise ValidationException([error], message=error.message)

    async def _get_existing(self, id: int) -> ProductModel:
        product = await self.repository.find_by_id(id)
        if product is None:
            raise NotFoundException(f"Product with ID {id} not found")
        return product

    async def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        candidates = await self.repository.search(name, ["name"])
        for candidate in candidates:
            if candidate.name.lower() == name.lower() and candidate.id != exclude_id:
                raise ValidationException.for_field(
                    "name",
                    DUPLICATE_NAME_MESSAGE,
                    value=name,
                    constraint="unique",
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                )

    # Operations

    async def create(self, data: ProductCreate, base_url: str) -> ApiResponse:
        payload = data.model_dump()
        errors = validation.validate_product_create(payload)
        if errors:
            raise ValidationException(errors)

        try:
            await self._ensure_unique_name(data.name)
            created = Product.model_validate(await self.repository.create(payload))
            await self._invalidate_cache()

            await self.pubsub.publish(ProductEvent.CREATED.value, created)
            logger.info(f"Product {created.id} created")

            return self.response_builder.build_success_response(
                created,
                "Product created successfully",
                status.HTTP_201_CREATED,
                self.trace_id,
                self._item_links(base_url, created),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("create product", e)

    async def _load_page(self, params: ProductQueryParams) -> PaginatedResult:
        options = build_query_options(params)
        result = await self.repository.find_with_filters(options)
        return PaginatedResult(
            data=[Product.model_validate(row) for row in result.data],
            pagination=result.pagination,
        )

    async def find_all(self, params: ProductQueryParams, base_url: str) -> ApiResponse:
        try:
            key = "products:list:" + json.dumps(params.cache_params(), sort_keys=True)
            result = await self._cached(key, lambda: self._load_page(params))

            fields = build_query_options(params).fields
            data = self._project(result.data, fields) if fields else result.data

            pagination = result.pagination
            links = self._product_links(
                base_url,
                collection=True,
                current_page=pagination.current_page,
                total_pages=pagination.total_pages,
                has_next=pagination.has_next,
                has_prev=pagination.has_prev,
            )
            return self.response_builder.build_success_response(
                data,
                "Products retrieved successfully" if data else "No products found",
                status.HTTP_200_OK,
                self.trace_id,
                links,
                pagination,
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve products", e)

    @staticmethod
    def _project(products: List[Product], fields: List[str]) -> List[dict]:
        """Keep only the requested known fields; unknown names are ignored."""
        known = list(dict.fromkeys(WIRE_NAMES[f] for f in fields if f in WIRE_NAMES))
        if not known:
            return products
        projected = []
        for product in products:
            item = product.model_dump(mode="json", by_alias=True)
            projected.append({key: item[key] for key in known})
        return projected

    async def find_one(self, id: int, base_url: str) -> ApiResponse:
        self._check_id(id)
        try:
            product = Product.model_validate(await self._get_existing(id))
            return self.response_builder.build_success_response(
                product,
                "Product retrieved successfully",
                status.HTTP_200_OK,
                self.trace_id,
                self._item_links(base_url, product),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve product", e)

    async def update(self, id: int, data: ProductUpdate, base_url: str) -> ApiResponse:
        self._check_id(id)
        changes = data.changes()
        errors = validation.validate_product_update(changes)
        if errors:
            raise ValidationException(errors)

        try:
            existing = await self._get_existing(id)
            if changes.get("name") and changes["name"] != existing.name:
                await self._ensure_unique_name(changes["name"], exclude_id=id)

            row = await self.repository.update(id, changes)
            if row is None:
                raise NotFoundException(f"Product with ID {id} not found")
            updated = Product.model_validate(row)
            await self._invalidate_cache()

            await self.pubsub.publish(ProductEvent.UPDATED.value, updated)
            logger.info(f"Product {id} updated: {sorted(changes)}")

            return self.response_builder.build_success_response(
                updated,
                "Product updated successfully",
                status.HTTP_200_OK,
                self.trace_id,
                self._item_links(base_url, updated),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("update product", e)

    async def remove(self, id: int, base_url: str) -> ApiResponse:
        self._check_id(id)
        try:
            await self._get_existing(id)
            await self.repository.delete(id)
            await self._invalidate_cache()

            await self.pubsub.publish(ProductEvent.DELETED.value, ProductDeleted(id=id))
            logger.info(f"Product {id} deleted")

            return self.response_builder.build_success_response(
                None,
                "Product deleted successfully",
                status.HTTP_200_OK,
                self.trace_id,
                self._product_links(base_url, collection=True),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("delete product", e)

    async def search(self, query: str, fields: Optional[List[str]], base_url: str) -> ApiResponse:
        if not query or not query.strip():
            raise ValidationException.for_field(
                "query", "Search query cannot be empty", value=query, constraint="required"
            )
        fields = fields or DEFAULT_SEARCH_FIELDS

        try:
            rows = await self.repository.search(query.strip(), fields)
            products = [Product.model_validate(row) for row in rows]
            return self.response_builder.build_success_response(
                products,
                "Search completed successfully"
                if products
                else "No products found matching the search criteria",
                status.HTTP_200_OK,
                self.trace_id,
                self._product_links(base_url, collection=True),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("search products", e)

    async def find_by_category(self, category: str, base_url: str) -> ApiResponse:
        if not category or not category.strip():
            raise ValidationException.for_field(
                "category", "Category cannot be empty", value=category, constraint="required"
            )

        try:
            rows = await self.repository.find_by_category(category.strip().lower())
            products = [Product.model_validate(row) for row in rows]
            return self.response_builder.build_success_response(
                products,
                "Products retrieved successfully"
                if products
                else "No products found in this category",
                status.HTTP_200_OK,
                self.trace_id,
                self._product_links(base_url, collection=True),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve products by category", e)

    async def find_by_price_range(
        self, min_price: float, max_price: float, base_url: str
    ) -> ApiResponse:
        if min_price < 0 or max_price < 0:
            raise ValidationException.for_fields(
                [
                    {"field": "minPrice", "message": "Minimum price cannot be negative", "value": min_price, "constraint": "min"},
                    {"field": "maxPrice", "message": "Maximum price cannot be negative", "value": max_price, "constraint": "min"},
                ]
            )
        if min_price > max_price:
            raise ValidationException.for_field(
                "minPrice",
                "Minimum price cannot be greater than maximum price",
                value=min_price,
                constraint="comparison",
            )

        try:
            rows = await self.repository.find_by_price_range(min_price, max_price)
            products = [Product.model_validate(row) for row in rows]
            return self.response_builder.build_success_response(
                products,
                "Products retrieved successfully"
                if products
                else "No products found in this price range",
                status.HTTP_200_OK,
                self.trace_id,
                self._product_links(base_url, collection=True),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve products by price range", e)

    async def get_categories(self, base_url: str) -> ApiResponse:
        try:
            categories = await self._cached("products:categories", self.repository.get_categories)
            return self.response_builder.build_success_response(
                categories,
                "Categories retrieved successfully",
                status.HTTP_200_OK,
                self.trace_id,
                self._product_links(base_url, collection=True),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve categories", e)

    # Subscriptions

    def subscribe_to_product_created(self) -> Subscription:
        return self.pubsub.async_iterator(ProductEvent.CREATED.value)

    def subscribe_to_product_updated(self) -> Subscription:
        return self.pubsub.async_iterator(ProductEvent.UPDATED.value)

    def subscribe_to_product_deleted(self) -> Subscription:
        return self.pubsub.async_iterator(ProductEvent.DELETED.value)
