"""
Envelope and HATEOAS link construction shared by the REST routes and the
GraphQL resolvers.

Everything here is a pure function of its arguments apart from the timestamp
stamped into ``meta``.
"""
from datetime import datetime, timezone
import math
from typing import Any, Dict, List, Optional, Union

from storefront.config import API_VERSION, DOCUMENTATION_URL
from storefront.models.schemas.response import (
    ApiError,
    ApiErrorResponse,
    ApiResponse,
    FieldError,
    HATEOASLink,
    HATEOASLinks,
    LinkContext,
    PaginationMeta,
    ResponseMeta,
)

JSON_TYPE = "application/json"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ResponseBuilder:
    def __init__(self, version: str = API_VERSION):
        self.version = version

    def generate_metadata(
        self, trace_id: str, pagination: Optional[PaginationMeta] = None
    ) -> ResponseMeta:
        return ResponseMeta(
            timestamp=utc_timestamp(),
            trace_id=trace_id,
            version=self.version,
            pagination=pagination,
        )

    def build_success_response(
        self,
        data: Any,
        message: str,
        status_code: int,
        trace_id: str,
        links: HATEOASLinks,
        pagination: Optional[PaginationMeta] = None,
    ) -> ApiResponse:
        return ApiResponse(
            success=True,
            status_code=status_code,
            message=message,
            data=data,
            meta=self.generate_metadata(trace_id, pagination),
            links=links,
        )

    def build_error_response(
        self,
        code: str,
        message: str,
        status_code: int,
        trace_id: str,
        self_url: str,
        details: Optional[Union[List[FieldError], str]] = None,
        hint: Optional[str] = None,
    ) -> ApiErrorResponse:
        return ApiErrorResponse(
            success=False,
            status_code=status_code,
            error=ApiError(code=code, message=message, details=details, hint=hint),
            meta=self.generate_metadata(trace_id),
            links=HATEOASLinks(self_link=self_url, documentation=DOCUMENTATION_URL),
        )

    @staticmethod
    def create_link(href: str, method: str, rel: str, type: Optional[str] = None) -> HATEOASLink:
        return HATEOASLink(href=href, method=method, rel=rel, type=type)

    @staticmethod
    def build_pagination_meta(page: int, total_items: int, per_page: int) -> PaginationMeta:
        total_pages = math.ceil(total_items / per_page) if per_page else 0
        return PaginationMeta(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            items_per_page=per_page,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    def generate_hateoas_links(self, context: LinkContext) -> HATEOASLinks:
        base_url = context.base_url

        if context.resource_id is not None:
            resource_url = f"{base_url}/{context.resource_id}"
            links = HATEOASLinks(
                self_link=resource_url,
                related={
                    "update": self.create_link(resource_url, "PATCH", "update", JSON_TYPE),
                    "delete": self.create_link(resource_url, "DELETE", "delete"),
                    "collection": self.create_link(base_url, "GET", "collection", JSON_TYPE),
                },
            )
        else:
            links = HATEOASLinks(
                self_link=base_url,
                related={
                    "create": self.create_link(base_url, "POST", "create", JSON_TYPE),
                },
            )

        if context.current_page is not None:
            links.pagination = self._generate_pagination_links(context)

        return links

    def _generate_pagination_links(self, context: LinkContext) -> Dict[str, str]:
        current_page = context.current_page

        def page_url(page: int) -> str:
            return f"{context.base_url}?page={page}"

        links = {"first": page_url(1)}
        if context.total_pages:
            links["last"] = page_url(context.total_pages)
        if context.has_prev and current_page > 1:
            links["prev"] = page_url(current_page - 1)
        if context.has_next:
            links["next"] = page_url(current_page + 1)
        return links
