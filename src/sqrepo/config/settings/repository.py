"""Config settings – RepositorySettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from sqrepo.config.errors import InvalidSettingValueError
from sqrepo.config.settings.base import Settings

_DIRECTIONS = ("ASC", "DESC")


@dataclasses.dataclass
class RepositorySettings(Settings):
    """Defaults shared by every repository instance.

    ``updated_field`` names the column stamped with the current time on
    every save; an empty string turns stamping off.
    """

    _prefix: ClassVar[str] = "SQREPO"

    default_page_size: int = 10
    order_direction: str = "DESC"
    updated_field: str = "updated_date"
    primary_key: str = "id"

    def _validate(self) -> None:
        if self.default_page_size < 1:
            raise InvalidSettingValueError(
                "default_page_size", self.default_page_size, "must be >= 1"
            )
        direction = self.order_direction.upper()
        if direction not in _DIRECTIONS:
            raise InvalidSettingValueError(
                "order_direction", self.order_direction, "must be ASC or DESC"
            )
        self.order_direction = direction
        if not self.primary_key:
            raise InvalidSettingValueError("primary_key", self.primary_key, "must not be empty")


__all__ = ["RepositorySettings"]
