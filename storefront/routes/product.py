# routes/product.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from storefront.database.dependencies import PRODUCTS_PATH, get_product_service, products_url
from storefront.models.enums import ProductSortField, SortOrder
from storefront.models.schemas.product import ProductCreate, ProductQueryParams, ProductUpdate
from storefront.models.schemas.response import ApiResponse
from storefront.services.product import ProductService

router = APIRouter(prefix=PRODUCTS_PATH, tags=["products"])


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: Request,
    data: ProductCreate,
    service: ProductService = Depends(get_product_service),
):
    """Create a new product."""
    return await service.create(data, products_url(request))


@router.get("", response_model=ApiResponse)
async def list_products(
    request: Request,
    category: Optional[str] = Query(None, description="Filter by category"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    search: Optional[str] = Query(None, description="Text across name, description and category"),
    name: Optional[str] = Query(None, description="Case-insensitive name match"),
    sort_by: Optional[ProductSortField] = Query(None, alias="sortBy"),
    sort_order: Optional[SortOrder] = Query(None, alias="sortOrder"),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    fields: Optional[str] = Query(None, description="Comma-separated fields to return"),
    service: ProductService = Depends(get_product_service),
):
    """List products with filtering, sorting and pagination."""
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
        fields=fields,
    )
    return await service.find_all(params, products_url(request))


@router.get("/search/{query}", response_model=ApiResponse)
async def search_products(
    request: Request,
    query: str,
    fields: Optional[str] = Query(None, description="Comma-separated fields to search in"),
    service: ProductService = Depends(get_product_service),
):
    """Search products by text."""
    field_list = [f.strip() for f in fields.split(",") if f.strip()] if fields else None
    return await service.search(query, field_list, products_url(request))


@router.get("/category/{category}", response_model=ApiResponse)
async def get_products_by_category(
    request: Request,
    category: str,
    service: ProductService = Depends(get_product_service),
):
    return await service.find_by_category(category, products_url(request))


@router.get("/price-range/{min_price}/{max_price}", response_model=ApiResponse)
async def get_products_by_price_range(
    request: Request,
    min_price: float,
    max_price: float,
    service: ProductService = Depends(get_product_service),
):
    return await service.find_by_price_range(min_price, max_price, products_url(request))


@router.get("/meta/categories", response_model=ApiResponse)
async def get_categories(
    request: Request,
    service: ProductService = Depends(get_product_service),
):
    """Distinct categories currently in use."""
    return await service.get_categories(products_url(request))


@router.get("/{product_id}", response_model=ApiResponse)
async def get_product(
    request: Request,
    product_id: int,
    service: ProductService = Depends(get_product_service),
):
    """Get a specific product by ID."""
    return await service.find_one(product_id, products_url(request))


@router.patch("/{product_id}", response_model=ApiResponse)
async def update_product(
    request: Request,
    product_id: int,
    data: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    """Partially update a product."""
    return await service.update(product_id, data, products_url(request))


@router.delete("/{product_id}", response_model=ApiResponse)
async def delete_product(
    request: Request,
    product_id: int,
    service: ProductService = Depends(get_product_service),
):
    """Delete a product."""
    return await service.remove(product_id, products_url(request))
