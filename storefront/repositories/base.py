# repositories/base.py
import asyncio
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront.models.enums import SortOrder
from storefront.models.schemas.query import (
    FilterOptions,
    PaginatedResult,
    PaginationOptions,
    QueryOptions,
    SortOptions,
)
from storefront.services.response_builder import ResponseBuilder
from storefront.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class BaseRepository(Generic[T]):
    """
    Generic SQLAlchemy repository.

    Every call opens its own short-lived session from ``session_factory`` and
    runs on a worker thread, so independent reads can be awaited concurrently.
    Subclasses describe their filters, sortable columns and searchable fields.
    """

    model: Type[T]
    searchable_fields: Tuple[str, ...] = ()
    sortable_fields: Dict[str, str] = {}

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    # Hooks

    def build_conditions(self, filters: Optional[FilterOptions]) -> List[Any]:
        return []

    def default_order_by(self) -> List[Any]:
        return [self.model.id.desc()]

    def search_order_by(self) -> List[Any]:
        return self.default_order_by()

    # Plumbing

    async def _run(self, fn: Callable, *args):
        return await asyncio.to_thread(fn, *args)

    def _read(self, operation: Callable[[Session], Any]):
        with self.session_factory() as db:
            return operation(db)

    def _handle_db_operation(self, operation: Callable[[Session], Any]):
        with self.session_factory() as db:
            try:
                result = operation(db)
                db.commit()
                return result
            except IntegrityError as e:
                db.rollback()
                logger.error(f"Database integrity error: {e}")
                raise
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Database operation error: {e}")
                raise

    def _order_by(self, sort: Optional[SortOptions]) -> List[Any]:
        if sort is None or sort.field not in self.sortable_fields:
            return self.default_order_by()
        column = getattr(self.model, self.sortable_fields[sort.field])
        primary = column.desc() if sort.order == SortOrder.DESC else column.asc()
        return [primary, self.model.id.asc()]

    # CRUD

    async def find_by_id(self, id: int) -> Optional[T]:
        return await self._run(self._read, lambda db: db.get(self.model, id))

    async def find_all(self) -> Sequence[T]:
        statement = select(self.model).order_by(self.model.id.asc())
        return await self._run(self._read, lambda db: db.scalars(statement).all())

    async def create(self, data: Dict[str, Any]) -> T:
        def operation(db: Session):
            instance = self.model(**data)
            db.add(instance)
            db.flush()
            db.refresh(instance)
            return instance

        return await self._run(self._handle_db_operation, operation)

    async def update(self, id: int, data: Dict[str, Any]) -> Optional[T]:
        def operation(db: Session):
            instance = db.get(self.model, id)
            if instance is None:
                return None
            for field, value in data.items():
                setattr(instance, field, value)
            db.flush()
            db.refresh(instance)
            return instance

        return await self._run(self._handle_db_operation, operation)

    async def delete(self, id: int) -> bool:
        def operation(db: Session):
            instance = db.get(self.model, id)
            if instance is None:
                return False
            db.delete(instance)
            return True

        return await self._run(self._handle_db_operation, operation)

    # Query shaping

    async def find_with_filters(self, options: QueryOptions) -> PaginatedResult[T]:
        pagination = options.pagination or PaginationOptions()
        page, limit = pagination.page, pagination.limit
        conditions = self.build_conditions(options.filters)

        fetch_statement = (
            select(self.model)
            .where(*conditions)
            .order_by(*self._order_by(options.sort))
            .offset(pagination.skip)
            .limit(limit)
        )
        count_statement = select(func.count()).select_from(self.model).where(*conditions)

        # two independent reads; no snapshot is shared between them
        rows, total_items = await asyncio.gather(
            self._run(self._read, lambda db: db.scalars(fetch_statement).all()),
            self._run(self._read, lambda db: db.scalar(count_statement)),
        )

        pagination_meta = ResponseBuilder.build_pagination_meta(page, total_items, limit)
        logger.debug(
            f"{self.model.__name__} page {page}/{pagination_meta.total_pages} ({len(rows)} of {total_items} rows)"
        )

        return PaginatedResult(data=list(rows), pagination=pagination_meta)

    async def search(self, query: str, fields: Sequence[str]) -> List[T]:
        columns = [
            getattr(self.model, field)
            for field in dict.fromkeys(fields)
            if field in self.searchable_fields
        ]
        if not columns:
            return []

        statement = (
            select(self.model)
            .where(or_(*[column.icontains(query, autoescape=True) for column in columns]))
            .order_by(*self.search_order_by())
        )
        rows = await self._run(self._read, lambda db: db.scalars(statement).all())
        return list(rows)

    async def count_total(self, filters: Optional[FilterOptions] = None) -> int:
        statement = select(func.count()).select_from(self.model)
        if filters is not None:
            statement = statement.where(*self.build_conditions(filters))
        return await self._run(self._read, lambda db: db.scalar(statement))
