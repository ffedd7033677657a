"""Transaction – run a unit of work under a store transaction."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from sqrepo.observability.logging import get_logger

R = TypeVar("R")

_log = get_logger(__name__)


@runtime_checkable
class TransactionalStore(Protocol):
    """Port: a store able to run *work* inside one transaction.

    The store hands its transaction handle to *work*, commits when it
    returns and rolls back (re-raising) when it fails.
    """

    async def transaction(self, work: Callable[[Any], Awaitable[R]]) -> R: ...


class TransactionRunner:
    """Executes callbacks under a store-provided transaction handle.

    The runner never commits or rolls back itself; pass the handle it
    gives you as ``transaction=`` to repository calls::

        async def transfer(tx):
            await accounts.save(debit, tx)
            await accounts.save(credit, tx)

        await TransactionRunner.run(database, transfer)
    """

    @staticmethod
    async def run(store: TransactionalStore, callback: Callable[[Any], Awaitable[R]]) -> R:
        _log.debug("transaction.run", store=type(store).__name__)
        return await store.transaction(callback)


async def run(store: TransactionalStore, callback: Callable[[Any], Awaitable[R]]) -> R:
    """Module-level shortcut for :meth:`TransactionRunner.run`."""
    return await TransactionRunner.run(store, callback)


__all__ = ["TransactionRunner", "TransactionalStore", "run"]
