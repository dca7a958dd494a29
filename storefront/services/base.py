# services/base.py
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from aiocache import Cache
from fastapi import HTTPException, status

from storefront.config import CACHE_TTL
from storefront.models.schemas.response import HATEOASLinks, LinkContext
from storefront.repositories.base import BaseRepository
from storefront.services.pubsub import PubSub
from storefront.services.response_builder import ResponseBuilder
from storefront.utils.logging import get_logger
from storefront.utils.trace import get_trace_id

T = TypeVar("T")

logger = get_logger(__name__)


class BaseService(Generic[T]):
    """
    Shared plumbing for resource services: repository access, the event bus,
    envelope building and an optional read cache.
    """

    def __init__(
        self,
        repository: BaseRepository[T],
        pubsub: PubSub,
        response_builder: Optional[ResponseBuilder] = None,
        cache: Optional[Cache] = None,
        cache_ttl: int = CACHE_TTL,
    ):
        self.repository = repository
        self.pubsub = pubsub
        self.response_builder = response_builder or ResponseBuilder()
        self.cache = cache
        self.cache_ttl = cache_ttl

    @property
    def trace_id(self) -> str:
        return get_trace_id()

    def _links(self, base_url: str, **context: Any) -> HATEOASLinks:
        return self.response_builder.generate_hateoas_links(
            LinkContext(base_url=base_url, **context)
        )

    def _failure(self, action: str, error: Exception) -> HTTPException:
        logger.error(f"Failed to {action}: {error!r}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Failed to {action}"
        )

    async def _cached(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        if self.cache is None or self.cache_ttl <= 0:
            return await loader()

        value = await self.cache.get(key)
        if value is not None:
            logger.debug(f"Cache hit for {key}")
            return value

        value = await loader()
        await self.cache.set(key, value, ttl=self.cache_ttl)
        return value

    async def _invalidate_cache(self) -> None:
        if self.cache is not None:
            await self.cache.clear()
