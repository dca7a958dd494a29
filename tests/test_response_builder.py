# tests/test_response_builder.py
from datetime import datetime

import pytest

from storefront.models.schemas.response import LinkContext
from storefront.services.response_builder import ResponseBuilder

BASE = "http://testserver/api/v1/products"


@pytest.fixture
def builder():
    return ResponseBuilder(version="9.9.9")


def test_item_links(builder):
    links = builder.generate_hateoas_links(LinkContext(base_url=BASE, resource_id=7))
    assert links.self_link == f"{BASE}/7"
    assert links.related["update"].method == "PATCH"
    assert links.related["update"].href == f"{BASE}/7"
    assert links.related["delete"].method == "DELETE"
    assert links.related["collection"].href == BASE
    assert links.related["collection"].method == "GET"
    assert links.pagination is None


def test_collection_links(builder):
    links = builder.generate_hateoas_links(LinkContext(base_url=BASE))
    assert links.self_link == BASE
    assert set(links.related) == {"create"}
    assert links.related["create"].method == "POST"


def test_pagination_links_middle_page(builder):
    links = builder.generate_hateoas_links(
        LinkContext(base_url=BASE, current_page=2, total_pages=3, has_next=True, has_prev=True)
    )
    assert links.pagination == {
        "first": f"{BASE}?page=1",
        "last": f"{BASE}?page=3",
        "prev": f"{BASE}?page=1",
        "next": f"{BASE}?page=3",
    }


def test_pagination_links_empty_result(builder):
    links = builder.generate_hateoas_links(
        LinkContext(base_url=BASE, current_page=1, total_pages=0, has_next=False, has_prev=False)
    )
    assert links.pagination == {"first": f"{BASE}?page=1"}


def test_pagination_links_first_page(builder):
    links = builder.generate_hateoas_links(
        LinkContext(base_url=BASE, current_page=1, total_pages=3, has_next=True, has_prev=False)
    )
    assert links.pagination == {
        "first": f"{BASE}?page=1",
        "last": f"{BASE}?page=3",
        "next": f"{BASE}?page=2",
    }


def test_link_generation_is_deterministic(builder):
    context = LinkContext(base_url=BASE, resource_id=3, current_page=1, total_pages=1)
    assert builder.generate_hateoas_links(context) == builder.generate_hateoas_links(context)


def test_success_envelope(builder):
    links = builder.generate_hateoas_links(LinkContext(base_url=BASE))
    pagination = builder.build_pagination_meta(page=1, total_items=25, per_page=10)
    response = builder.build_success_response(
        [1, 2], "ok", 200, "trace-1", links, pagination
    )
    body = response.model_dump(by_alias=True)

    assert body["success"] is True
    assert body["statusCode"] == 200
    assert body["meta"]["traceId"] == "trace-1"
    assert body["meta"]["version"] == "9.9.9"
    assert body["meta"]["pagination"]["totalPages"] == 3
    assert body["meta"]["pagination"]["hasNext"] is True
    assert body["links"]["self"] == BASE
    assert body["meta"]["timestamp"].endswith("Z")
    datetime.fromisoformat(body["meta"]["timestamp"][:-1])


def test_error_envelope(builder):
    response = builder.build_error_response(
        "NOT_FOUND", "Product with ID 5 not found", 404, "trace-2", f"{BASE}/5"
    )
    body = response.model_dump(by_alias=True, exclude_none=True)
    assert body["success"] is False
    assert body["error"] == {"code": "NOT_FOUND", "message": "Product with ID 5 not found"}
    assert body["links"] == {"self": f"{BASE}/5", "documentation": "/docs"}


def test_pagination_meta():
    meta = ResponseBuilder.build_pagination_meta(page=3, total_items=25, per_page=10)
    assert meta.total_pages == 3
    assert meta.has_next is False
    assert meta.has_prev is True
