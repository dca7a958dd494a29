from contextlib import asynccontextmanager
import time
from typing import Optional

from aiocache import Cache
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from storefront.config import (
    API_VERSION,
    CACHE_TTL,
    CORS_ORIGINS,
    DATABASE_URL,
    GRAPHIQL_ENABLED,
    GZIP_MINIMUM_SIZE,
)
from storefront.database.database import build_engine, build_session_factory, init_db
from storefront.graphql.schema import create_graphql_router
from storefront.routes import product, user
from storefront.services.pubsub import PubSub
from storefront.services.response_builder import ResponseBuilder
from storefront.utils.exception_handlers import register_exception_handlers
from storefront.utils.logging import get_logger
from storefront.utils.trace import TRACE_ID_HEADER, set_trace_id

logger = get_logger(__name__)


def create_app(
    database_url: Optional[str] = None,
    cache_ttl: int = CACHE_TTL,
    graphiql: bool = GRAPHIQL_ENABLED,
) -> FastAPI:
    engine = build_engine(database_url or DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        app.state.session_factory = build_session_factory(engine)
        app.state.pubsub = PubSub()
        app.state.cache = Cache(Cache.MEMORY)
        app.state.cache_ttl = cache_ttl
        app.state.response_builder = ResponseBuilder(API_VERSION)
        logger.info(f"Storefront API {API_VERSION} started")
        try:
            yield
        finally:
            await app.state.pubsub.close()
            await app.state.cache.close()
            engine.dispose()
            logger.info("Storefront API stopped")

    app = FastAPI(title="Storefront API", version=API_VERSION, lifespan=lifespan)

    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[TRACE_ID_HEADER],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        trace_id = set_trace_id(request.headers.get(TRACE_ID_HEADER))
        # the catch-all error handler runs outside this middleware and reads it from here
        request.state.trace_id = trace_id
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(f"{request.method} {request.url} failed [{trace_id}]")
            raise
        elapsed = (time.perf_counter() - start) * 1000
        client = request.client.host if request.client else "-"
        logger.info(
            f"{client} {request.method} {request.url} {response.status_code} {elapsed:.2f}ms"
        )
        response.headers[TRACE_ID_HEADER] = trace_id
        return response

    register_exception_handlers(app)

    app.include_router(product.router)
    app.include_router(user.router)
    app.include_router(create_graphql_router(graphiql), prefix="/graphql")

    return app


app = create_app()
