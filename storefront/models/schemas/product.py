from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError
from typing import Any, Optional

from storefront.models.enums import ProductSortField, SortOrder
from storefront.utils import validation
from .base import CamelModel, TimestampModel


def _enforce(error, value):
    if error is not None:
        raise PydanticCustomError(error.constraint, error.message)
    return value


class ProductBase(CamelModel):
    name: str = Field(examples=["MacBook Pro 16"])
    description: Optional[str] = Field(
        examples=["High-performance laptop for professionals"], default=None
    )
    price: float = Field(examples=[2499.99])
    category: str = Field(examples=["electronics"])

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: Any) -> Any:
        return validation.trim(value)

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, value: Any) -> Any:
        return validation.empty_to_none(value)

    @field_validator("price", mode="before")
    @classmethod
    def normalize_price(cls, value: Any) -> Any:
        return validation.to_number(value)

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, value: Any) -> Any:
        return validation.lowercase(value)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _enforce(validation.check_product_name(value), value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return _enforce(validation.check_description(value), value)

    @field_validator("price")
    @classmethod
    def validate_price(cls, value: float) -> float:
        return _enforce(validation.check_price(value), value)

    @field_validator("category")
    @classmethod
    def validate_category(cls, value: str) -> str:
        return _enforce(validation.check_category(value), value)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    """All fields optional; an explicit null is only accepted for description."""

    name: Optional[str] = Field(examples=["MacBook Pro 16"], default=None)
    price: Optional[float] = Field(examples=[2299.99], default=None)
    category: Optional[str] = Field(examples=["electronics"], default=None)

    def changes(self) -> dict:
        """Fields the caller actually sent, by attribute name."""
        return self.model_dump(exclude_unset=True)


class Product(TimestampModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: str


class ProductDeleted(CamelModel):
    id: int


class ProductQueryParams(CamelModel):
    """Query shape shared by the REST list endpoint and the GraphQL query."""

    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: Optional[str] = None
    name: Optional[str] = None
    sort_by: Optional[ProductSortField] = None
    sort_order: Optional[SortOrder] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    fields: Optional[str] = None

    def cache_params(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
