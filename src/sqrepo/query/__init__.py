"""Query – conditions, criteria, named queries and query options."""
from sqrepo.query.conditions import (
    UNSET,
    Condition,
    Op,
    between,
    eq,
    gt,
    gte,
    ilike,
    in_,
    is_,
    is_empty,
    is_sequence_value,
    like,
    lt,
    lte,
    ne,
    not_in,
)
from sqrepo.query.criteria import Criteria, CriteriaBuilder, Criterion
from sqrepo.query.named import NamedQuery, NamedQueryDeriver, QueryKind, parse_query_name
from sqrepo.query.options import (
    INCLUDE_ALL,
    NO_INCLUDE,
    CountResult,
    Include,
    QueryOptions,
    Sort,
    SortDirection,
)

__all__ = [
    "INCLUDE_ALL",
    "NO_INCLUDE",
    "UNSET",
    "Condition",
    "CountResult",
    "Criteria",
    "CriteriaBuilder",
    "Criterion",
    "Include",
    "NamedQuery",
    "NamedQueryDeriver",
    "Op",
    "QueryKind",
    "QueryOptions",
    "Sort",
    "SortDirection",
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
    "parse_query_name",
]
