from fastapi import Depends
from starlette.requests import HTTPConnection

from storefront.config import API_PREFIX
from storefront.repositories.product import ProductRepository
from storefront.repositories.user import UserRepository
from storefront.services.product import ProductService
from storefront.services.pubsub import PubSub
from storefront.services.user import UserService

PRODUCTS_PATH = f"{API_PREFIX}/products"
USERS_PATH = "/user"


def get_pubsub(connection: HTTPConnection) -> PubSub:
    return connection.app.state.pubsub


def get_product_service(
    connection: HTTPConnection, pubsub: PubSub = Depends(get_pubsub)
) -> ProductService:
    state = connection.app.state
    return ProductService(
        ProductRepository(state.session_factory),
        pubsub,
        response_builder=state.response_builder,
        cache=state.cache,
        cache_ttl=state.cache_ttl,
    )


def get_user_service(
    connection: HTTPConnection, pubsub: PubSub = Depends(get_pubsub)
) -> UserService:
    state = connection.app.state
    return UserService(
        UserRepository(state.session_factory),
        pubsub,
        response_builder=state.response_builder,
    )


def base_url(connection: HTTPConnection, path: str) -> str:
    """Absolute URL of a collection, e.g. ``http://host/api/v1/products``."""
    return f"{str(connection.base_url).rstrip('/')}{path}"


def products_url(connection: HTTPConnection) -> str:
    return base_url(connection, PRODUCTS_PATH)


def users_url(connection: HTTPConnection) -> str:
    return base_url(connection, USERS_PATH)
