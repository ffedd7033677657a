"""Pagination – limit/offset math and the page envelope.

Pages are zero-based: page ``2`` with size ``5`` starts at row ``10``.
"""
from __future__ import annotations

import dataclasses
import math
from collections.abc import Sequence
from typing import Any, Callable, Generic, TypeVar

from sqrepo.query.options import CountResult

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


@dataclasses.dataclass(frozen=True, slots=True)
class Pagination:
    limit: int
    offset: int


@dataclasses.dataclass(frozen=True)
class PageEnvelope(Generic[T]):
    """Offset-based page of results with computed navigation properties."""

    total_items: int
    rows: list[T]
    total_pages: int
    current_page: int

    @property
    def has_next(self) -> bool:
        return self.current_page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 0

    def map(self, fn: Callable[[T], Any]) -> "PageEnvelope[Any]":
        """Return a new envelope with each row transformed by *fn*."""
        return PageEnvelope(
            total_items=self.total_items,
            rows=[fn(row) for row in self.rows],
            total_pages=self.total_pages,
            current_page=self.current_page,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_items": self.total_items,
            "rows": list(self.rows),
            "total_pages": self.total_pages,
            "current_page": self.current_page,
        }


def get_pagination(
    page: int | str | None = None,
    size: int | str | None = None,
    default_size: int = DEFAULT_PAGE_SIZE,
) -> Pagination:
    """Translate a (page, size) request into limit/offset.

    Missing or zero values fall back to ``default_size`` and offset ``0``.
    Numeric strings are accepted so query-string values can be passed as is.
    """
    limit = int(size) if size else default_size
    offset = int(page) * limit if page else 0
    return Pagination(limit=limit, offset=offset)


def get_paging_data(
    data: CountResult[T] | Sequence[Any],
    page: int | str | None,
    limit: int,
) -> PageEnvelope[T]:
    """Shape a count + rows result into a :class:`PageEnvelope`.

    ``limit`` must be non-zero.
    """
    if isinstance(data, CountResult):
        total_items, rows = data.count, data.rows
    else:
        total_items, rows = data
    return PageEnvelope(
        total_items=total_items,
        rows=list(rows),
        total_pages=math.ceil(total_items / limit),
        current_page=int(page) if page else 0,
    )


__all__ = ["DEFAULT_PAGE_SIZE", "PageEnvelope", "Pagination", "get_pagination", "get_paging_data"]
