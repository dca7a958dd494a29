# tests/test_graphql.py
from datetime import datetime
import time

import pytest
from fastapi import HTTPException
from graphql import GraphQLError

from storefront.graphql.errors import with_extensions
from storefront.graphql.product import ProductSubscriptionFilter, matches_product_filter
from storefront.graphql.user import UserSubscriptionFilter, matches_user_filter
from storefront.models.schemas.product import Product
from storefront.models.schemas.user import UserResponse

CREATE_PRODUCT = """
mutation Create($input: CreateProductInput!) {
  createProduct(input: $input) { id name description price category createdAt }
}
"""


def _graphql(client, query, variables=None):
    response = client.post("/graphql", json={"query": query, "variables": variables or {}})
    assert response.status_code == 200, response.text
    return response.json()


def _create(client, **fields):
    product = {"name": "Widget A", "price": 9.99, "category": "electronics"}
    product.update(fields)
    body = _graphql(client, CREATE_PRODUCT, {"input": product})
    assert "errors" not in body, body
    return body["data"]["createProduct"]


def _product(**overrides):
    values = {
        "id": 1,
        "name": "Widget A",
        "description": None,
        "price": 10.0,
        "category": "electronics",
        "created_at": datetime(2024, 1, 1),
        "updated_at": datetime(2024, 1, 1),
    }
    values.update(overrides)
    return Product(**values)


def test_create_and_fetch_product(client):
    created = _create(client, category="Books")
    assert created["category"] == "books"
    assert created["description"] is None

    body = _graphql(client, "query($id: Int!) { product(id: $id) { id name } }", {"id": created["id"]})
    assert body["data"]["product"] == {"id": created["id"], "name": "Widget A"}


def test_products_query_filters_sorts_and_paginates(client):
    _create(client, name="Cheap One", price=5)
    _create(client, name="Mid One", price=15)
    _create(client, name="Novel", price=12, category="books")

    body = _graphql(
        client,
        """
        {
          products(category: "electronics", sortBy: PRICE, sortOrder: DESC, limit: 1) {
            name price
          }
        }
        """,
    )
    assert body["data"]["products"] == [{"name": "Mid One", "price": 15.0}]


def test_other_product_queries(client):
    _create(client, name="Novel", price=12, category="books", description="A gripping story")
    _create(client, name="Lamp", price=30, category="home")

    body = _graphql(
        client,
        """
        {
          searchProducts(query: "gripping") { name }
          productsByCategory(category: "home") { name }
          productsByPriceRange(minPrice: 10, maxPrice: 20) { name }
          productCategories
        }
        """,
    )
    assert body["data"] == {
        "searchProducts": [{"name": "Novel"}],
        "productsByCategory": [{"name": "Lamp"}],
        "productsByPriceRange": [{"name": "Novel"}],
        "productCategories": ["books", "home"],
    }


def test_update_and_delete_product(client):
    created = _create(client)

    body = _graphql(
        client,
        "mutation($id: Int!) { updateProduct(id: $id, input: {price: 20}) { price name } }",
        {"id": created["id"]},
    )
    assert body["data"]["updateProduct"] == {"price": 20.0, "name": "Widget A"}

    body = _graphql(client, "mutation($id: Int!) { deleteProduct(id: $id) }", {"id": created["id"]})
    assert body["data"]["deleteProduct"] is True

    body = _graphql(client, "query($id: Int!) { product(id: $id) { id } }", {"id": created["id"]})
    assert body["data"] is None
    assert body["errors"][0]["message"] == f"Product with ID {created['id']} not found"
    assert body["errors"][0]["extensions"] == {"code": "NOT_FOUND", "statusCode": 404}


def test_invalid_input_surfaces_validation_error(client):
    body = _graphql(client, CREATE_PRODUCT, {"input": {"name": "A", "price": -1, "category": "nope"}})

    assert body["data"] is None
    error = body["errors"][0]
    assert error["message"].startswith("name:")
    assert error["extensions"]["code"] == "VALIDATION_ERROR"
    assert error["extensions"]["statusCode"] == 400
    details = {detail["field"]: detail for detail in error["extensions"]["details"]}
    assert {field: detail["constraint"] for field, detail in details.items()} == {
        "name": "isValidProductName",
        "price": "isPositivePrice",
        "category": "isValidCategory",
    }
    assert details["name"]["value"] == "A"
    assert details["price"]["message"]


def test_duplicate_name_surfaces_error(client):
    _create(client)
    body = _graphql(client, CREATE_PRODUCT, {"input": {"name": "widget a", "price": 1, "category": "books"}})

    assert "already exists" in body["errors"][0]["message"]
    extensions = body["errors"][0]["extensions"]
    assert extensions["statusCode"] == 422
    assert extensions["details"][0]["constraint"] == "unique"


def test_errors_without_a_service_exception_are_unchanged():
    error = GraphQLError("Cannot query field 'nope'")
    assert with_extensions(error) is error

    wrapped = with_extensions(GraphQLError("Failed to create product", original_error=HTTPException(400, "x")))
    assert wrapped.extensions == {"code": "BAD_REQUEST", "statusCode": 400}


def test_user_queries_and_mutations(client):
    body = _graphql(
        client,
        'mutation { createUser(input: {email: "jane@example.com", password: "pw"}) { id email } }',
    )
    user = body["data"]["createUser"]
    assert user["email"] == "jane@example.com"

    body = _graphql(
        client,
        "mutation($id: Int!) { updateUser(id: $id, input: {email: \"j@example.com\"}) { email } }",
        {"id": user["id"]},
    )
    assert body["data"]["updateUser"]["email"] == "j@example.com"

    body = _graphql(client, '{ users(email: "example") { email } }')
    assert body["data"]["users"] == [{"email": "j@example.com"}]

    body = _graphql(client, "mutation($id: Int!) { deleteUser(id: $id) }", {"id": user["id"]})
    assert body["data"]["deleteUser"] is True


def test_product_filter_matching():
    product = _product(price=10.0, category="electronics")

    assert matches_product_filter(product, None)
    assert matches_product_filter(product, ProductSubscriptionFilter())
    assert matches_product_filter(product, ProductSubscriptionFilter(categories=["Electronics"]))
    assert not matches_product_filter(product, ProductSubscriptionFilter(categories=["books"]))
    assert matches_product_filter(product, ProductSubscriptionFilter(min_price=10, max_price=10))
    assert not matches_product_filter(product, ProductSubscriptionFilter(min_price=10.01))
    assert not matches_product_filter(product, ProductSubscriptionFilter(max_price=9.99))
    # user id is accepted but never restricts delivery
    assert matches_product_filter(product, ProductSubscriptionFilter(user_id="someone"))


def test_user_filter_matching():
    user = UserResponse(id=1, email="Jane@Example.com")

    assert matches_user_filter(user, None)
    assert matches_user_filter(user, UserSubscriptionFilter(email="example"))
    assert not matches_user_filter(user, UserSubscriptionFilter(email="other.org"))


def _wait_for_subscriber(app, topic, timeout=5.0):
    deadline = time.monotonic() + timeout
    while app.state.pubsub.subscriber_count(topic) == 0:
        if time.monotonic() > deadline:
            pytest.fail(f"no subscriber registered for {topic}")
        time.sleep(0.01)


def test_product_created_subscription_applies_filter(client):
    with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
        ws.send_json({"type": "connection_init"})
        assert ws.receive_json()["type"] == "connection_ack"

        ws.send_json(
            {
                "id": "1",
                "type": "subscribe",
                "payload": {
                    "query": 'subscription { productCreated(filter: {categories: ["books"]}) { name category } }'
                },
            }
        )
        _wait_for_subscriber(client.app, "productCreated")

        client.post("/api/v1/products", json={"name": "Lamp", "price": 30, "category": "home"})
        client.post("/api/v1/products", json={"name": "Novel", "price": 12, "category": "books"})

        message = ws.receive_json()
        assert message["type"] == "next"
        assert message["payload"]["data"]["productCreated"] == {"name": "Novel", "category": "books"}

        ws.send_json({"id": "1", "type": "complete"})
