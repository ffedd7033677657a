"""Repository – generic base class and the store model port."""
from sqrepo.repository.base import Repository, entity_values, new_primary_key
from sqrepo.repository.store import StoreModel

__all__ = ["Repository", "StoreModel", "entity_values", "new_primary_key"]
