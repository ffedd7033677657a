"""Testing utilities – fakes for repositories built on sqrepo."""
from sqrepo.testing.fakes import FakeClock, InMemoryDatabase, InMemoryStoreModel

__all__ = ["FakeClock", "InMemoryDatabase", "InMemoryStoreModel"]
