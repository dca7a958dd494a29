# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from storefront.database.database import build_engine, build_session_factory, init_db
from storefront.main import create_app
from storefront.repositories.product import ProductRepository
from storefront.repositories.user import UserRepository
from storefront.services.product import ProductService
from storefront.services.pubsub import PubSub
from storefront.services.user import UserService


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'storefront-test.db'}"


@pytest.fixture
def session_factory(database_url):
    engine = build_engine(database_url)
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def product_repository(session_factory):
    return ProductRepository(session_factory)


@pytest.fixture
def user_repository(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def pubsub():
    return PubSub()


@pytest.fixture
def product_service(product_repository, pubsub):
    return ProductService(product_repository, pubsub)


@pytest.fixture
def user_service(user_repository, pubsub):
    return UserService(user_repository, pubsub)


@pytest.fixture
def client(database_url):
    app = create_app(database_url, cache_ttl=0)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def product_payload():
    def build(**overrides):
        payload = {
            "name": "Widget A",
            "description": "A very useful widget",
            "price": 9.99,
            "category": "electronics",
        }
        payload.update(overrides)
        return payload

    return build
