from typing import Any, Optional

from storefront.models.enums import SortOrder
from storefront.models.schemas.query import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    FilterOptions,
    PaginationOptions,
    QueryOptions,
    SortOptions,
)

TEXT_FILTERS = ("category", "search", "name", "email")
NUMERIC_FILTERS = ("min_price", "max_price")


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def build_query_options(params: Any) -> QueryOptions:
    """
    Map raw list parameters (REST query string or GraphQL arguments) onto
    normalized QueryOptions.

    Never raises: bad values are rejected earlier by the transport DTOs.
    """
    filters = {}
    for key in TEXT_FILTERS:
        value = getattr(params, key, None)
        if value:
            filters[key] = value
    for key in NUMERIC_FILTERS:
        value = getattr(params, key, None)
        if value is not None:
            filters[key] = value

    sort: Optional[SortOptions] = None
    sort_by = getattr(params, "sort_by", None)
    if sort_by:
        sort = SortOptions(
            field=_enum_value(sort_by),
            order=getattr(params, "sort_order", None) or SortOrder.ASC,
        )

    page = getattr(params, "page", None) or DEFAULT_PAGE
    limit = getattr(params, "limit", None) or DEFAULT_LIMIT
    pagination = PaginationOptions(
        page=max(page, 1),
        limit=max(min(limit, MAX_LIMIT), 1),
    )

    fields = None
    raw_fields = getattr(params, "fields", None)
    if raw_fields:
        fields = [field.strip() for field in raw_fields.split(",") if field.strip()]

    return QueryOptions(
        filters=FilterOptions(**filters) if filters else None,
        sort=sort,
        pagination=pagination,
        fields=fields,
    )
