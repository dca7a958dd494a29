from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from storefront.config import DATABASE_URL, DB_CONNECT_RETRIES
from storefront.models.database_models import Base
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def build_engine(url: str = DATABASE_URL) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # sessions are opened from worker threads
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def _log_retry(retry_state):
    logger.warning(
        f"Database not reachable (attempt {retry_state.attempt_number}), retrying: "
        f"{retry_state.outcome.exception()}"
    )


@retry(
    stop=stop_after_attempt(DB_CONNECT_RETRIES),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=_log_retry,
    reraise=True,
)
def init_db(engine: Engine) -> None:
    """Check connectivity and create any missing tables."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    Base.metadata.create_all(engine)
    logger.info("Database connected successfully")
