"""SQLAlchemy adapter – SqlAlchemyDatabase (transactional store)."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from sqrepo.observability.logging import get_logger

R = TypeVar("R")

_log = get_logger(__name__)


class SqlAlchemyDatabase:
    """Runs units of work inside one session transaction.

    The transaction handle given to the work callback is the
    :class:`~sqlalchemy.ext.asyncio.AsyncSession` itself; store models
    reuse it when it is passed back as ``transaction=``.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._factory = session_factory

    async def transaction(self, work: Callable[[AsyncSession], Awaitable[R]]) -> R:
        async with self._factory() as session:
            _log.debug("transaction.started")
            try:
                async with session.begin():
                    result = await work(session)
            except BaseException:
                _log.debug("transaction.rolled_back")
                raise
            _log.debug("transaction.committed")
            return result


__all__ = ["SqlAlchemyDatabase"]
