"""
sqrepo – generic async repositories with criteria and named queries.

Import path convention::

    from sqrepo import Repository, Criteria, CriteriaBuilder
    from sqrepo.query import eq, ne, in_
    from sqrepo.adapters.sqlalchemy import SqlAlchemyStoreModel
"""

from sqrepo.errors import AbstractInstantiationError, ArityMismatch, ArityMismatchError
from sqrepo.pagination import PageEnvelope, get_pagination, get_paging_data
from sqrepo.query import Condition, Criteria, CriteriaBuilder, Op, QueryOptions
from sqrepo.repository import Repository, StoreModel
from sqrepo.transaction import TransactionRunner

__version__ = "0.1.0"

__all__ = [
    "AbstractInstantiationError",
    "ArityMismatch",
    "ArityMismatchError",
    "Condition",
    "Criteria",
    "CriteriaBuilder",
    "Op",
    "PageEnvelope",
    "QueryOptions",
    "Repository",
    "StoreModel",
    "TransactionRunner",
    "__version__",
    "get_pagination",
    "get_paging_data",
]
