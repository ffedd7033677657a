"""SQLAlchemy adapter – session factory, transactional database, store model."""
from sqrepo.adapters.sqlalchemy.database import SqlAlchemyDatabase
from sqrepo.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from sqrepo.adapters.sqlalchemy.store import SqlAlchemyStoreModel

__all__ = ["SqlAlchemyDatabase", "SqlAlchemySessionFactory", "SqlAlchemyStoreModel"]
