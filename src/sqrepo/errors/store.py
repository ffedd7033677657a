"""Store adapter errors."""

from __future__ import annotations

from typing import Any

from sqrepo.errors.base import BaseError


class StoreError(BaseError):
    """A where-clause or option could not be applied to the underlying model."""

    default_code = "store_error"

    def __init__(self, message: str, *, model: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.model = model


class UnknownFieldError(StoreError):
    """The where-clause, order or aggregate names a field the model does not have."""

    default_code = "unknown_field"

    def __init__(self, model: str, field: str, **kwargs: Any) -> None:
        super().__init__(
            f"Model '{model}' has no field '{field}'",
            model=model,
            detail={"model": model, "field": field},
            **kwargs,
        )
        self.field = field


__all__ = ["StoreError", "UnknownFieldError"]
