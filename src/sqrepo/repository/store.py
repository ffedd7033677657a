"""Repository – the store model port.

Any object exposing these coroutines can back a :class:`Repository`;
``adapters/sqlalchemy`` ships one for SQLAlchemy models and
``testing/fakes`` an in-memory one.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from sqrepo.query.options import CountResult, QueryOptions

TEntity_co = TypeVar("TEntity_co", covariant=True)


@runtime_checkable
class StoreModel(Protocol[TEntity_co]):
    """Port: persistence operations over one entity type."""

    async def find_all(self, options: QueryOptions) -> list[TEntity_co]: ...

    async def find_one(self, options: QueryOptions) -> TEntity_co | None: ...

    async def find_and_count_all(self, options: QueryOptions) -> CountResult[TEntity_co]: ...

    async def upsert(self, values: Mapping[str, Any], options: QueryOptions) -> tuple[TEntity_co, bool]:
        """Insert or update by primary key; the flag is ``True`` on insert."""
        ...

    async def sum(self, field: str, options: QueryOptions | None = None) -> Any: ...


__all__ = ["StoreModel"]
