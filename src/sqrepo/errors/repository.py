"""Repository errors – construction and orchestration failures."""

from __future__ import annotations

from typing import Any

from sqrepo.errors.base import BaseError


class RepositoryError(BaseError):
    """Raised by the repository layer itself (never by the store)."""

    default_code = "repository_error"


class AbstractInstantiationError(RepositoryError):
    """The abstract base repository was instantiated directly."""

    default_code = "abstract_instantiation"

    def __init__(self, class_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Can not instantiate abstract class '{class_name}', extend it instead",
            detail={"class": class_name},
            **kwargs,
        )
        self.class_name = class_name


__all__ = ["AbstractInstantiationError", "RepositoryError"]
