"""SQLAlchemy adapter – SqlAlchemyStoreModel.

Translates :class:`~sqrepo.query.QueryOptions` into SQLAlchemy 2.x
statements for one mapped class. Driver errors (``IntegrityError`` and
friends) propagate untouched.
"""
from __future__ import annotations

import contextlib
import dataclasses
import operator
from collections.abc import AsyncIterator, Callable, Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sqrepo.errors import StoreError, UnknownFieldError
from sqrepo.observability.logging import get_logger
from sqrepo.query.conditions import Condition, Op
from sqrepo.query.options import CountResult, Include, QueryOptions, SortDirection

TModel = TypeVar("TModel")

_log = get_logger(__name__)


def _eq(column: Any, value: Any) -> Any:
    return column.is_(None) if value is None else column == value


def _ne(column: Any, value: Any) -> Any:
    return column.is_not(None) if value is None else column != value


_OPERATORS: dict[Op, Callable[[Any, Any], Any]] = {
    Op.EQ: _eq,
    Op.NE: _ne,
    Op.IN: lambda column, value: column.in_(list(value)),
    Op.NOT_IN: lambda column, value: column.not_in(list(value)),
    Op.GT: operator.gt,
    Op.GTE: operator.ge,
    Op.LT: operator.lt,
    Op.LTE: operator.le,
    Op.LIKE: lambda column, value: column.like(value),
    Op.ILIKE: lambda column, value: column.ilike(value),
    Op.IS: lambda column, value: column.is_(value),
    Op.BETWEEN: lambda column, value: column.between(*value),
}


class SqlAlchemyStoreModel(Generic[TModel]):
    """:class:`~sqrepo.repository.StoreModel` over a declarative model class.

    Without a ``transaction`` in the options every call runs in its own
    session and commits on exit; with one, the given session is used and
    left for the caller's transaction to commit.

    ``upsert`` looks the row up by primary key and then inserts or updates
    it. The two steps are not atomic: concurrent saves of the same new key
    can fail with ``IntegrityError`` instead of merging. Callers that race
    on keys should serialise those saves or retry.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession], model_class: type[TModel]) -> None:
        self._factory = session_factory
        self._model = model_class
        self._mapper = sa_inspect(model_class)
        self._pk_keys = tuple(
            self._mapper.get_property_by_column(column).key for column in self._mapper.primary_key
        )

    @property
    def model_class(self) -> type[TModel]:
        return self._model

    # Statement building -----------------------------------------------
    def _column(self, field: Any) -> Any:
        if not isinstance(field, str) or field not in self._mapper.column_attrs:
            raise UnknownFieldError(self._model.__name__, str(field))
        return getattr(self._model, field)

    def _where(self, where: Mapping[str, Any]) -> list[Any]:
        clauses = []
        for field, condition in where.items():
            column = self._column(field)
            if isinstance(condition, Condition):
                try:
                    build = _OPERATORS[condition.op]
                except KeyError:
                    raise StoreError(
                        f"Unsupported operator {condition.op!r}", model=self._model.__name__
                    ) from None
                clauses.append(build(column, condition.value))
            else:
                clauses.append(_eq(column, condition))
        return clauses

    def _loaders(self, include: Include) -> list[Any]:
        relationships = self._mapper.relationships
        if include.all:
            return [selectinload(getattr(self._model, rel.key)) for rel in relationships]
        loaders = []
        for name in include.relations:
            if name not in relationships:
                raise UnknownFieldError(self._model.__name__, name)
            loaders.append(selectinload(getattr(self._model, name)))
        return loaders

    def _select(self, options: QueryOptions) -> Any:
        stmt = select(self._model).where(*self._where(options.where))
        loaders = self._loaders(options.include)
        if loaders:
            stmt = stmt.options(*loaders)
        for sort in options.order:
            column = self._column(sort.field)
            stmt = stmt.order_by(column.desc() if sort.direction is SortDirection.DESC else column.asc())
        if options.limit is not None:
            stmt = stmt.limit(options.limit)
        if options.offset is not None:
            stmt = stmt.offset(options.offset)
        return stmt

    @contextlib.asynccontextmanager
    async def _session(self, options: QueryOptions | None) -> AsyncIterator[AsyncSession]:
        if options is not None and options.transaction is not None:
            yield options.transaction
            return
        async with self._factory() as session:
            async with session.begin():
                yield session

    # StoreModel -------------------------------------------------------
    async def find_all(self, options: QueryOptions) -> list[TModel]:
        async with self._session(options) as session:
            result = await session.execute(self._select(options))
            return list(result.scalars().all())

    async def find_one(self, options: QueryOptions) -> TModel | None:
        async with self._session(options) as session:
            result = await session.execute(self._select(dataclasses.replace(options, limit=1)))
            return result.scalars().first()

    async def find_and_count_all(self, options: QueryOptions) -> CountResult[TModel]:
        count_stmt = select(func.count()).select_from(self._model).where(*self._where(options.where))
        async with self._session(options) as session:
            count = (await session.execute(count_stmt)).scalar_one()
            rows = (await session.execute(self._select(options))).scalars().all()
        return CountResult(count=count, rows=list(rows))

    async def upsert(self, values: Mapping[str, Any], options: QueryOptions) -> tuple[TModel, bool]:
        columns = {k: v for k, v in values.items() if k in self._mapper.column_attrs}
        ignored = sorted(set(values) - set(columns))
        if ignored:
            _log.debug("store.upsert.ignored_fields", model=self._model.__name__, fields=ignored)
        identity = tuple(columns.get(key) for key in self._pk_keys)
        async with self._session(options) as session:
            existing = None
            if all(part is not None for part in identity):
                existing = await session.get(self._model, identity[0] if len(identity) == 1 else identity)
            if existing is None:
                entity = self._model(**columns)
                session.add(entity)
                created = True
            else:
                for key, value in columns.items():
                    setattr(existing, key, value)
                entity = existing
                created = False
            await session.flush()
        return entity, created

    async def sum(self, field: str, options: QueryOptions | None = None) -> Any:
        stmt = select(func.sum(self._column(field)))
        if options is not None:
            stmt = stmt.where(*self._where(options.where))
        async with self._session(options) as session:
            total = (await session.execute(stmt)).scalar()
        return 0 if total is None else total


__all__ = ["SqlAlchemyStoreModel"]
