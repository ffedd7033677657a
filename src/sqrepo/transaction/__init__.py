"""Transaction – pass-through transaction runner."""
from sqrepo.transaction.runner import TransactionalStore, TransactionRunner, run

__all__ = ["TransactionRunner", "TransactionalStore", "run"]
