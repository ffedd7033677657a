"""Query errors – named-query derivation and query-option validation."""

from __future__ import annotations

from typing import Any

from sqrepo.errors.base import BaseError


class QueryError(BaseError):
    """A query could not be derived or assembled."""

    default_code = "query_error"


class ArityMismatchError(QueryError):
    """A named query was invoked with the wrong number of arguments."""

    default_code = "arity_mismatch"

    def __init__(
        self,
        query_name: str,
        expected: int,
        received: int,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Named query '{query_name}' expects {expected} argument(s), got {received}",
            detail={"query": query_name, "expected": expected, "received": received},
            **kwargs,
        )
        self.query_name = query_name
        self.expected = expected
        self.received = received


# Short name used throughout the docs
ArityMismatch = ArityMismatchError


class InvalidQueryNameError(QueryError):
    """A method name uses a query prefix but cannot be parsed into fields."""

    default_code = "invalid_query_name"

    def __init__(self, query_name: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Invalid named query '{query_name}': {reason}",
            detail={"query": query_name},
            **kwargs,
        )
        self.query_name = query_name
        self.reason = reason


class QueryOptionsError(QueryError):
    """Query options failed validation before reaching the store."""

    default_code = "invalid_query_options"

    def __init__(self, option: str, value: object, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Query option '{option}' has invalid value {value!r}: {reason}",
            detail={"option": option},
            **kwargs,
        )
        self.option = option
        self.value = value
        self.reason = reason


__all__ = [
    "ArityMismatch",
    "ArityMismatchError",
    "InvalidQueryNameError",
    "QueryError",
    "QueryOptionsError",
]
