from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from .base import CamelModel


class FieldError(CamelModel):
    field: str
    message: str
    value: Any = None
    constraint: Optional[str] = None


class HATEOASLink(CamelModel):
    href: str
    method: str
    rel: str
    type: Optional[str] = None


class HATEOASLinks(CamelModel):
    self_link: str = Field(alias="self")
    related: Optional[Dict[str, HATEOASLink]] = None
    pagination: Optional[Dict[str, str]] = None
    documentation: Optional[str] = None


class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool


class ResponseMeta(CamelModel):
    timestamp: str
    trace_id: str
    version: str
    pagination: Optional[PaginationMeta] = None


class ApiResponse(CamelModel):
    """Standard success envelope shared by every REST endpoint."""

    success: bool = True
    status_code: int
    message: str
    data: Any = None
    meta: ResponseMeta
    links: HATEOASLinks


class ApiError(CamelModel):
    code: str
    message: str
    details: Optional[Union[List[FieldError], str]] = None
    hint: Optional[str] = None


class ApiErrorResponse(CamelModel):
    success: bool = False
    status_code: int
    error: ApiError
    meta: ResponseMeta
    links: HATEOASLinks


class LinkContext(BaseModel):
    """Everything the link generator needs; it derives nothing on its own."""

    base_url: str
    resource_id: Optional[Union[int, str]] = None
    action: Optional[str] = None
    resource_state: Optional[Dict[str, Any]] = None
    current_page: Optional[int] = None
    total_pages: Optional[int] = None
    has_next: Optional[bool] = None
    has_prev: Optional[bool] = None
