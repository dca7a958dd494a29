# tests/test_product_repository.py
import pytest

from storefront.models.enums import SortOrder
from storefront.models.schemas.query import (
    FilterOptions,
    PaginationOptions,
    QueryOptions,
    SortOptions,
)
from storefront.repositories.product import ProductRepository

CATALOG = [
    {"name": "Budget Phone", "description": "Entry level", "price": 5.0, "category": "electronics"},
    {"name": "Cable Pack", "description": "Assorted cables", "price": 12.5, "category": "electronics"},
    {"name": "Earbuds", "description": None, "price": 20.0, "category": "electronics"},
    {"name": "Laptop Pro", "description": "Powerful laptop", "price": 1500.0, "category": "electronics"},
    {"name": "Paperback Novel", "description": "A gripping story", "price": 9.0, "category": "books"},
    {"name": "Yoga Mat", "description": "Non-slip", "price": 25.0, "category": "sports"},
]


@pytest.fixture
async def seeded(product_repository):
    return [await product_repository.create(dict(item)) for item in CATALOG]


async def test_create_assigns_id_and_timestamps(product_repository):
    product = await product_repository.create(dict(CATALOG[0]))
    assert product.id > 0
    assert product.created_at is not None
    assert product.updated_at is not None

    fetched = await product_repository.find_by_id(product.id)
    assert fetched.name == "Budget Phone"
    assert fetched.price == 5.0


async def test_filtered_page_with_count(product_repository, seeded):
    result = await product_repository.find_with_filters(
        QueryOptions(
            filters=FilterOptions(category="electronics", min_price=5, max_price=20),
            pagination=PaginationOptions(page=1, limit=1),
        )
    )
    assert len(result.data) == 1
    assert result.pagination.total_items == 3
    assert result.pagination.total_pages == 3
    assert result.pagination.has_next is True
    assert result.pagination.has_prev is False


async def test_price_bounds_are_inclusive(product_repository, seeded):
    result = await product_repository.find_with_filters(
        QueryOptions(filters=FilterOptions(min_price=12.5, max_price=20))
    )
    assert sorted(p.name for p in result.data) == ["Cable Pack", "Earbuds"]


async def test_default_order_is_newest_first(product_repository, seeded):
    result = await product_repository.find_with_filters(QueryOptions())
    assert [p.id for p in result.data] == sorted((p.id for p in seeded), reverse=True)


async def test_sort_by_price_descending(product_repository, seeded):
    result = await product_repository.find_with_filters(
        QueryOptions(sort=SortOptions(field="price", order=SortOrder.DESC))
    )
    prices = [p.price for p in result.data]
    assert prices == sorted(prices, reverse=True)


async def test_search_filter_spans_text_columns(product_repository, seeded):
    by_description = await product_repository.find_with_filters(
        QueryOptions(filters=FilterOptions(search="GRIPPING"))
    )
    assert [p.name for p in by_description.data] == ["Paperback Novel"]

    by_category = await product_repository.find_with_filters(
        QueryOptions(filters=FilterOptions(search="sport"))
    )
    assert [p.name for p in by_category.data] == ["Yoga Mat"]


async def test_name_filter_is_case_insensitive(product_repository, seeded):
    result = await product_repository.find_with_filters(
        QueryOptions(filters=FilterOptions(name="laptop"))
    )
    assert [p.name for p in result.data] == ["Laptop Pro"]


async def test_page_past_the_end(product_repository, seeded):
    result = await product_repository.find_with_filters(
        QueryOptions(pagination=PaginationOptions(page=5, limit=10))
    )
    assert result.data == []
    assert result.pagination.total_items == len(CATALOG)
    assert result.pagination.has_next is False
    assert result.pagination.has_prev is True


async def test_empty_table_has_no_pages(product_repository):
    result = await product_repository.find_with_filters(QueryOptions())
    assert result.pagination.total_pages == 0
    assert result.pagination.has_next is False


async def test_search_restricted_to_allowed_fields(product_repository, seeded):
    results = await product_repository.search("laptop", ["description", "password"])
    assert [p.name for p in results] == ["Laptop Pro"]


async def test_search_with_only_unknown_fields_skips_database():
    def unavailable():
        raise AssertionError("database should not be touched")

    repository = ProductRepository(unavailable)
    assert await repository.search("anything", ["password", "id"]) == []


async def test_search_escapes_wildcards(product_repository, seeded):
    assert await product_repository.search("%", ["name"]) == []


async def test_find_by_category(product_repository, seeded):
    products = await product_repository.find_by_category("electronics")
    assert len(products) == 4
    assert all(p.category == "electronics" for p in products)


async def test_find_by_price_range_sorted_by_price(product_repository, seeded):
    products = await product_repository.find_by_price_range(9, 25)
    assert [p.price for p in products] == [9.0, 12.5, 20.0, 25.0]


async def test_get_categories_distinct_and_sorted(product_repository, seeded):
    assert await product_repository.get_categories() == ["books", "electronics", "sports"]


async def test_count_total(product_repository, seeded):
    assert await product_repository.count_total() == len(CATALOG)
    assert await product_repository.count_total(FilterOptions(category="books")) == 1


async def test_update_and_delete(product_repository, seeded):
    target = seeded[0]
    updated = await product_repository.update(target.id, {"price": 6.5})
    assert updated.price == 6.5
    assert updated.name == target.name

    assert await product_repository.delete(target.id) is True
    assert await product_repository.find_by_id(target.id) is None
    assert await product_repository.delete(target.id) is False
    assert await product_repository.update(target.id, {"price": 1}) is None
