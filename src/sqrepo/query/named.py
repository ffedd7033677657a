"""Query – named queries derived from method names.

A repository subclass declares stubs whose names spell out the filter::

    class UserRepository(Repository[User]):
        async def find_all_by_name_and_city(self, name, city): ...
        async def find_by_email(self, email): ...

:func:`parse_query_name` turns each name into a :class:`NamedQuery`
descriptor. Both snake_case (``find_all_by_name_and_city``) and camelCase
(``findAllByNameAndCity``) spellings are recognised; camelCase field
names get their first letter lower-cased.
"""
from __future__ import annotations

import dataclasses
import inspect
import re
from collections.abc import Callable, Container, Sequence
from enum import Enum
from typing import Any

from sqrepo.errors import ArityMismatchError, InvalidQueryNameError
from sqrepo.query.conditions import in_, is_sequence_value


class QueryKind(str, Enum):
    FIND_ONE = "find_one"
    FIND_ALL = "find_all"


@dataclasses.dataclass(frozen=True)
class NamedQuery:
    """Parsed form of a query method name."""

    name: str
    kind: QueryKind
    fields: tuple[str, ...]

    @property
    def arity(self) -> int:
        return len(self.fields)


_SNAKE = re.compile(r"^(?P<prefix>find_all_by|find_by)_(?P<rest>.*)$")
_CAMEL = re.compile(r"^(?P<prefix>findAllBy|findBy)(?P<rest>[A-Z].*)$")
_CAMEL_CONNECTOR = re.compile(r"And(?=[A-Z])")

_KINDS = {
    "find_all_by": QueryKind.FIND_ALL,
    "findAllBy": QueryKind.FIND_ALL,
    "find_by": QueryKind.FIND_ONE,
    "findBy": QueryKind.FIND_ONE,
}


def _lower_first(segment: str) -> str:
    return segment[:1].lower() + segment[1:]


def parse_query_name(name: str) -> NamedQuery | None:
    """Parse *name* into a :class:`NamedQuery`, or ``None`` if it is not one.

    Raises :class:`InvalidQueryNameError` when the prefix matches but a
    field segment is empty (``find_by_name_and_``).
    """
    match = _SNAKE.match(name)
    if match is not None:
        rest = match.group("rest")
        segments = rest.split("_and_") if rest else []
    else:
        match = _CAMEL.match(name)
        if match is None:
            return None
        segments = [_lower_first(s) for s in _CAMEL_CONNECTOR.split(match.group("rest"))]

    if not segments:
        return None
    if any(not segment for segment in segments) or name.endswith(("_and", "And")):
        raise InvalidQueryNameError(name, "empty field name between connectors")
    return NamedQuery(name=name, kind=_KINDS[match.group("prefix")], fields=tuple(segments))


def _positional_bounds(func: Callable[..., Any]) -> tuple[int, int] | None:
    """(required, total) positional parameters after ``self``; ``None`` for ``*args``."""
    params = list(inspect.signature(func).parameters.values())[1:]
    positional = [
        p for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return None
    required = sum(1 for p in positional if p.default is inspect.Parameter.empty)
    return required, len(positional)


class NamedQueryDeriver:
    """Collects the named queries a repository class declares."""

    def derive(self, cls: type, *, exclude: Container[str] = ()) -> dict[str, NamedQuery]:
        """Parse every function declared directly on *cls* (not inherited)."""
        queries: dict[str, NamedQuery] = {}
        for attr_name, attr in vars(cls).items():
            if attr_name in exclude or not inspect.isfunction(attr):
                continue
            query = parse_query_name(attr_name)
            if query is None:
                continue
            bounds = _positional_bounds(attr)
            if bounds is not None and not bounds[0] <= query.arity <= bounds[1]:
                raise ArityMismatchError(attr_name, query.arity, bounds[1])
            queries[attr_name] = query
        return queries

    @staticmethod
    def build_where(query: NamedQuery, args: Sequence[Any]) -> dict[str, Any]:
        """Pair *args* with the query's fields; sequences become ``IN``."""
        if len(args) != query.arity:
            raise ArityMismatchError(query.name, query.arity, len(args))
        return {
            field: in_(arg) if is_sequence_value(arg) else arg
            for field, arg in zip(query.fields, args)
        }


__all__ = ["NamedQuery", "NamedQueryDeriver", "QueryKind", "parse_query_name"]
