"""Query – structured options handed to a store model.

``QueryOptions`` is validated when it is built, so a store adapter only
ever sees well-formed limits, offsets, order and include specs.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from sqrepo.errors import QueryOptionsError

T = TypeVar("T")


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclasses.dataclass(frozen=True)
class Sort:
    """Single sort criterion."""
    field: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def coerce(cls, value: Sort | Sequence[str] | str) -> Sort:
        """Accept a ``Sort``, a bare field name or a ``(field, direction)`` pair."""
        if isinstance(value, Sort):
            return value
        if isinstance(value, str):
            return cls(value)
        try:
            field, direction = value
            return cls(field, SortDirection(str(direction).upper()))
        except (TypeError, ValueError) as exc:
            raise QueryOptionsError("order", value, "expected (field, 'ASC'|'DESC')") from exc


@dataclasses.dataclass(frozen=True)
class Include:
    """Eager-load specification.

    ``Include(all=True)`` loads every relationship of the model;
    ``Include(relations=("orders",))`` loads only the named ones.
    """
    all: bool = False
    relations: tuple[str, ...] = ()

    @classmethod
    def coerce(cls, value: Include | Mapping[str, Any] | Sequence[str] | bool | None) -> Include:
        if value is None or value is False:
            return NO_INCLUDE
        if value is True:
            return INCLUDE_ALL
        if isinstance(value, Include):
            return value
        if isinstance(value, Mapping):
            return cls(all=bool(value.get("all", False)), relations=tuple(value.get("relations", ())))
        if isinstance(value, str):
            return cls(relations=(value,))
        if isinstance(value, Sequence):
            return cls(relations=tuple(value))
        raise QueryOptionsError("include", value, "expected Include, mapping, names or bool")


INCLUDE_ALL = Include(all=True)
NO_INCLUDE = Include()


def _check_non_negative(option: str, value: int | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise QueryOptionsError(option, value, "must be an integer")
    if value < 0:
        raise QueryOptionsError(option, value, "must be >= 0")


def _sorts(order: Any) -> tuple[Sort, ...]:
    """Normalise *order* into a tuple of :class:`Sort`.

    *order* is a sequence of sort entries. A lone field name or ``Sort`` is
    wrapped. A bare ``(field, direction)`` pair raises
    :class:`QueryOptionsError`; wrap it in a list.
    """
    if not order:
        return ()
    if isinstance(order, (str, Sort)):
        return (Sort.coerce(order),)
    entries = tuple(order)
    if (
        len(entries) == 2
        and all(isinstance(entry, str) for entry in entries)
        and entries[1].upper() in SortDirection.__members__
    ):
        raise QueryOptionsError("order", order, "expected a sequence of (field, direction) pairs")
    return tuple(Sort.coerce(entry) for entry in entries)


@dataclasses.dataclass(frozen=True)
class QueryOptions:
    """Everything a store call may need besides the entity values."""

    where: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    limit: int | None = None
    offset: int | None = None
    order: tuple[Sort, ...] = ()
    include: Include = NO_INCLUDE
    transaction: Any = None

    def __post_init__(self) -> None:
        if self.where is None:
            object.__setattr__(self, "where", {})
        elif not isinstance(self.where, Mapping):
            raise QueryOptionsError("where", self.where, "must be a mapping of field to condition")
        _check_non_negative("limit", self.limit)
        _check_non_negative("offset", self.offset)
        object.__setattr__(self, "order", _sorts(self.order))
        object.__setattr__(self, "include", Include.coerce(self.include))


@dataclasses.dataclass(frozen=True)
class CountResult(Generic[T]):
    """Raw result of a combined count + list query."""

    count: int
    rows: list[T]


__all__ = [
    "INCLUDE_ALL",
    "NO_INCLUDE",
    "CountResult",
    "Include",
    "QueryOptions",
    "Sort",
    "SortDirection",
]
