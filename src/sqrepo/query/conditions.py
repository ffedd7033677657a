"""Query – predicate conditions and the comparator vocabulary.

A where-clause is a plain mapping of field name to either a bare value
(equality) or a :class:`Condition`::

    {"status": ne("FAILURE"), "client_id": 1234, "region": in_(["eu", "us"])}
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from enum import Enum
from typing import Any, Final


class Op(str, Enum):
    """Comparators understood by every store implementation."""

    EQ = "eq"
    NE = "ne"
    IN = "in"
    NOT_IN = "not_in"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    LIKE = "like"
    ILIKE = "ilike"
    IS = "is"
    BETWEEN = "between"


@dataclasses.dataclass(frozen=True, slots=True)
class Condition:
    """A single comparator applied to whatever field it is attached to."""

    op: Op
    value: Any = None

    def __repr__(self) -> str:
        return f"{self.op.name}({self.value!r})"


class _Unset:
    """Marker for a value that was never supplied."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def is_sequence_value(value: Any) -> bool:
    """``True`` for list-like values; strings and bytes are scalars here."""
    return isinstance(value, _SEQUENCE_TYPES)


def is_empty(value: Any) -> bool:
    """``True`` when *value* is UNSET, ``""`` or an empty sequence.

    ``None`` is a real value (it filters for NULL) and is never empty.
    """
    if is_sequence_value(value):
        return len(value) < 1
    return value is UNSET or (isinstance(value, str) and value == "")


def eq(value: Any) -> Condition:
    return Condition(Op.EQ, value)


def ne(value: Any) -> Condition:
    return Condition(Op.NE, value)


def in_(values: Iterable[Any]) -> Condition:
    return Condition(Op.IN, tuple(values))


def not_in(values: Iterable[Any]) -> Condition:
    return Condition(Op.NOT_IN, tuple(values))


def gt(value: Any) -> Condition:
    return Condition(Op.GT, value)


def gte(value: Any) -> Condition:
    return Condition(Op.GTE, value)


def lt(value: Any) -> Condition:
    return Condition(Op.LT, value)


def lte(value: Any) -> Condition:
    return Condition(Op.LTE, value)


def like(pattern: str) -> Condition:
    return Condition(Op.LIKE, pattern)


def ilike(pattern: str) -> Condition:
    return Condition(Op.ILIKE, pattern)


def is_(value: Any) -> Condition:
    """``IS`` comparison, typically ``is_(None)`` or a boolean."""
    return Condition(Op.IS, value)


def between(low: Any, high: Any) -> Condition:
    """Inclusive range."""
    return Condition(Op.BETWEEN, (low, high))


__all__ = [
    "UNSET",
    "Condition",
    "Op",
    "between",
    "eq",
    "gt",
    "gte",
    "ilike",
    "in_",
    "is_",
    "is_empty",
    "is_sequence_value",
    "like",
    "lt",
    "lte",
    "ne",
    "not_in",
]
