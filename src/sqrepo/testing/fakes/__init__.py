"""Testing fakes – in-memory doubles for the store ports."""
from sqrepo.testing.fakes.clock import FakeClock
from sqrepo.testing.fakes.store import InMemoryDatabase, InMemoryStoreModel, InMemoryTransaction
from sqrepo.time import FrozenClock

__all__ = [
    "FakeClock",
    "FrozenClock",
    "InMemoryDatabase",
    "InMemoryStoreModel",
    "InMemoryTransaction",
]
