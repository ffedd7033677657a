"""Error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── RepositoryError          (repository.py)
    │   └── AbstractInstantiationError
    ├── QueryError               (query.py)
    │   ├── ArityMismatchError
    │   ├── InvalidQueryNameError
    │   └── QueryOptionsError
    └── StoreError               (store.py)
        └── UnknownFieldError

Errors raised by the database driver are never wrapped; they reach the
caller unchanged.
"""

from sqrepo.errors.base import BaseError
from sqrepo.errors.query import (
    ArityMismatch,
    ArityMismatchError,
    InvalidQueryNameError,
    QueryError,
    QueryOptionsError,
)
from sqrepo.errors.repository import AbstractInstantiationError, RepositoryError
from sqrepo.errors.store import StoreError, UnknownFieldError

__all__ = [
    "AbstractInstantiationError",
    "ArityMismatch",
    "ArityMismatchError",
    "BaseError",
    "InvalidQueryNameError",
    "QueryError",
    "QueryOptionsError",
    "RepositoryError",
    "StoreError",
    "UnknownFieldError",
]
