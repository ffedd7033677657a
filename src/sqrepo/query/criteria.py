"""Query – Criteria and CriteriaBuilder.

``Criteria`` turns an ordered list of ``(field, value, condition)``
triples into a where-clause, silently dropping every triple whose value
is empty (see :func:`~sqrepo.query.conditions.is_empty`). It lets callers
pass optional request parameters straight through without ``if`` checks::

    criteria = (
        CriteriaBuilder()
        .add("client_id", client_id, eq(client_id))
        .add("created_date", from_date, gte(from_date))
        .add("status", status, ne("FAILURE"))
        .add("request_id", None, ne(None))
        .build()
    )
    await repository.find_all_where(criteria.get_criteria())
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Union

from sqrepo.query.conditions import is_empty


@dataclasses.dataclass(frozen=True, slots=True)
class Criterion:
    """One ``(field, value, condition)`` triple.

    ``value`` only decides whether the triple survives; ``condition`` is
    what ends up in the where-clause.
    """

    field: str
    value: Any
    condition: Any

    @classmethod
    def coerce(cls, entry: CriterionLike) -> Criterion:
        if isinstance(entry, Criterion):
            return entry
        if isinstance(entry, Mapping):
            return cls(entry.get("field"), entry.get("value"), entry.get("condition"))  # type: ignore[arg-type]
        field, value, condition = entry
        return cls(field, value, condition)


CriterionLike = Union[Criterion, tuple[str, Any, Any], Mapping[str, Any]]


class Criteria(Mapping[str, Any]):
    """Immutable field -> condition mapping built from triples.

    The last triple wins when a field appears more than once.
    """

    __slots__ = ("_condition",)

    def __init__(self, criteria: Sequence[CriterionLike] = ()) -> None:
        condition: dict[str, Any] = {}
        for entry in criteria:
            criterion = Criterion.coerce(entry)
            if not is_empty(criterion.value):
                condition[criterion.field] = criterion.condition
        self._condition = MappingProxyType(condition)

    def get_criteria(self) -> Mapping[str, Any]:
        """Return the composed where-clause."""
        return self._condition

    def __getitem__(self, field: str) -> Any:
        return self._condition[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self._condition)

    def __len__(self) -> int:
        return len(self._condition)

    def __repr__(self) -> str:
        return f"Criteria({dict(self._condition)!r})"


class CriteriaBuilder:
    """Mutable accumulator of triples.

    Not meant to be shared between concurrent callers.
    """

    def __init__(self) -> None:
        self._criteria: list[Criterion] = []

    def add(self, field: str, value: Any, condition: Any) -> CriteriaBuilder:
        self._criteria.append(Criterion(field, value, condition))
        return self

    def build(self) -> Criteria:
        """Snapshot the triples added so far; the builder keeps them."""
        return Criteria(tuple(self._criteria))

    def clean(self) -> CriteriaBuilder:
        self._criteria = []
        return self

    def __len__(self) -> int:
        return len(self._criteria)


__all__ = ["Criteria", "CriteriaBuilder", "Criterion", "CriterionLike"]
