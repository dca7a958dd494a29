from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from storefront.models.enums import SortOrder
from .response import PaginationMeta

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class FilterOptions(BaseModel):
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    def present(self) -> dict:
        """Only the filter keys that were actually supplied."""
        return self.model_dump(exclude_none=True)


class SortOptions(BaseModel):
    field: str
    order: SortOrder = SortOrder.ASC


class PaginationOptions(BaseModel):
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class QueryOptions(BaseModel):
    filters: Optional[FilterOptions] = None
    sort: Optional[SortOptions] = None
    pagination: Optional[PaginationOptions] = None
    fields: Optional[List[str]] = None


class PaginatedResult(BaseModel, Generic[T]):
    data: List[Any]
    pagination: PaginationMeta
