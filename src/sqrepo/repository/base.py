"""Repository – generic base with CRUD, pagination, aggregation and named queries."""
from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, ClassVar, Generic, TypeVar

from sqrepo.config.settings import RepositorySettings
from sqrepo.errors import AbstractInstantiationError
from sqrepo.observability.logging import get_logger
from sqrepo.pagination import PageEnvelope, get_pagination, get_paging_data
from sqrepo.query.criteria import Criteria
from sqrepo.query.named import NamedQuery, NamedQueryDeriver, QueryKind
from sqrepo.query.options import INCLUDE_ALL, Include, QueryOptions, Sort, SortDirection
from sqrepo.repository.store import StoreModel
from sqrepo.time import Clock, SystemClock

TEntity = TypeVar("TEntity")

_log = get_logger(__name__)


def new_primary_key() -> str:
    """32-character hex token used when an entity arrives without a key."""
    return uuid.uuid4().hex


def entity_values(entity: Any) -> dict[str, Any]:
    """Flatten a mapping, dataclass or plain object into a values dict.

    Attributes starting with ``_`` (ORM instance state and the like) are skipped.
    """
    if isinstance(entity, Mapping):
        return dict(entity)
    if dataclasses.is_dataclass(entity) and not isinstance(entity, type):
        return {f.name: getattr(entity, f.name) for f in dataclasses.fields(entity)}
    return {k: v for k, v in vars(entity).items() if not k.startswith("_")}


def _where(where: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if where is None:
        return {}
    if isinstance(where, Criteria):
        return where.get_criteria()
    return where


class Repository(Generic[TEntity]):
    """Abstract async repository over a :class:`StoreModel`.

    Extend it and pass the store model (and the primary key name if it is
    not ``id``)::

        class UserRepository(Repository[User]):
            def __init__(self, model: StoreModel[User]) -> None:
                super().__init__(model, "user_id")

            async def find_all_by_name_and_city(self, name, city): ...
            async def find_by_email(self, email): ...

    Every method declared on the subclass whose name starts with
    ``find_by``/``find_all_by`` (or ``findBy``/``findAllBy``) is replaced,
    per instance, by a query built from its name. ``find_by`` returns at
    most one entity, ``find_all_by`` a list. Sequence arguments filter with
    ``IN``, anything else with equality.
    """

    _deriver: ClassVar[NamedQueryDeriver] = NamedQueryDeriver()

    def __new__(cls, *args: Any, **kwargs: Any) -> Repository[Any]:  # noqa: ARG003
        if cls is Repository:
            raise AbstractInstantiationError(cls.__name__)
        return super().__new__(cls)

    def __init__(
        self,
        model: StoreModel[TEntity],
        primary_key: str | None = None,
        *,
        settings: RepositorySettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings or RepositorySettings()
        self.primary_key = primary_key or self.settings.primary_key
        self.model = model
        self._clock: Clock = clock or SystemClock()
        self._log = _log.bind(repository=type(self).__name__)
        self.named_queries: Mapping[str, NamedQuery] = MappingProxyType(
            self._deriver.derive(type(self), exclude=vars(Repository))
        )
        for name, query in self.named_queries.items():
            setattr(self, name, self._bind_named_query(name))
            self._log.debug(
                "named_query.registered",
                query=name,
                kind=query.kind.value,
                fields=list(query.fields),
            )

    # Named queries ----------------------------------------------------
    def _bind_named_query(self, name: str) -> Callable[..., Any]:
        async def named_query(*args: Any, transaction: Any = None) -> Any:
            return await self.run_named_query(name, args, transaction=transaction)

        named_query.__name__ = named_query.__qualname__ = name
        return named_query

    async def run_named_query(
        self,
        name: str,
        args: Sequence[Any],
        *,
        transaction: Any = None,
    ) -> TEntity | list[TEntity] | None:
        """Execute the registered named query *name* with positional *args*."""
        query = self.named_queries[name]
        where = self._deriver.build_where(query, args)
        options = QueryOptions(where=where, include=INCLUDE_ALL, transaction=transaction)
        self._log.debug("named_query.executed", query=name, kind=query.kind.value)
        if query.kind is QueryKind.FIND_ONE:
            return await self.model.find_one(options)
        return await self.model.find_all(options)

    # Writes -----------------------------------------------------------
    async def save(self, entity: Any, transaction: Any = None) -> TEntity:
        """Insert or update *entity* and return the persisted entity.

        Returns the entity on update as well as on insert; use
        :meth:`upsert` to learn which one happened.
        """
        persisted, _ = await self.upsert(entity, transaction)
        return persisted

    async def upsert(self, entity: Any, transaction: Any = None) -> tuple[TEntity, bool]:
        """Like :meth:`save`, also returning ``True`` when a row was inserted."""
        values = entity_values(entity)
        if not values.get(self.primary_key):
            values[self.primary_key] = new_primary_key()
        if self.settings.updated_field:
            values[self.settings.updated_field] = self._clock.now()
        persisted, created = await self.model.upsert(values, QueryOptions(transaction=transaction))
        self._log.debug("repository.saved", created=created, fields=sorted(values))
        return persisted, created

    # Reads ------------------------------------------------------------
    async def find_all(self, transaction: Any = None) -> list[TEntity]:
        """Every entity, with all its relations loaded."""
        return await self.model.find_all(QueryOptions(include=INCLUDE_ALL, transaction=transaction))

    async def find_all_where(self, where: Mapping[str, Any], transaction: Any = None) -> list[TEntity]:
        return await self.model.find_all(
            QueryOptions(where=_where(where), include=INCLUDE_ALL, transaction=transaction)
        )

    async def find_all_by_criteria_and_paginated(
        self,
        criteria: Criteria | None = None,
        page: int | str | None = None,
        size: int | str | None = None,
        order_attr: str | None = None,
        transaction: Any = None,
    ) -> PageEnvelope[TEntity]:
        """Page through entities matching *criteria*.

        When *order_attr* is given the rows are sorted by it in the
        configured direction (``DESC`` unless overridden); otherwise the
        store's natural order applies.
        """
        pagination = get_pagination(page, size, self.settings.default_page_size)
        order: tuple[Sort, ...] = ()
        if order_attr:
            order = (Sort(order_attr, SortDirection(self.settings.order_direction)),)
        response = await self.model.find_and_count_all(
            QueryOptions(
                where=_where(criteria),
                limit=pagination.limit,
                offset=pagination.offset,
                order=order,
                include=INCLUDE_ALL,
                transaction=transaction,
            )
        )
        return get_paging_data(response, page, pagination.limit)

    async def find_and_count_all(
        self,
        condition: Mapping[str, Any] | None = None,
        order: Sequence[Sort | Sequence[str]] | None = None,
        page: int | str | None = None,
        size: int | str | None = None,
        include: Include | Mapping[str, Any] | Sequence[str] | bool | None = None,
        transaction: Any = None,
    ) -> PageEnvelope[TEntity]:
        """Paginated count + list with caller-supplied order and include.

        *order* is a sequence of ``Sort`` objects or ``(field, direction)``
        pairs, e.g. ``[("name", "DESC")]``. A bare pair is rejected.
        """
        pagination = get_pagination(page, size, self.settings.default_page_size)
        response = await self.model.find_and_count_all(
            QueryOptions(
                where=_where(condition),
                limit=pagination.limit,
                offset=pagination.offset,
                order=order or (),
                include=include,  # type: ignore[arg-type]
                transaction=transaction,
            )
        )
        return get_paging_data(response, page, pagination.limit)

    async def find_one(self, where: Mapping[str, Any], transaction: Any = None) -> TEntity | None:
        """First entity matching *where*, or ``None``."""
        return await self.model.find_one(
            QueryOptions(where=_where(where), include=INCLUDE_ALL, transaction=transaction)
        )

    async def find_by_id(self, id: Any, transaction: Any = None) -> TEntity | None:
        return await self.model.find_one(
            QueryOptions(where={self.primary_key: id}, include=INCLUDE_ALL, transaction=transaction)
        )

    async def sum(self, field: str, criteria: Criteria | None = None, transaction: Any = None) -> Any:
        """Sum of *field* over all rows, or over those matching *criteria*."""
        return await self.model.sum(
            field, QueryOptions(where=_where(criteria), transaction=transaction)
        )


__all__ = ["Repository", "entity_values", "new_primary_key"]
