from .location_cache import InMemoryLocationCache, SqlAlchemyLocationCache
from .registration_store import InMemoryRegistrationStore, SqlAlchemyRegistrationStore
from .sqlalchemy_db import SessionProvider, create_db_engine, get_db_url

__all__ = [
    "InMemoryLocationCache",
    "InMemoryRegistrationStore",
    "SessionProvider",
    "SqlAlchemyLocationCache",
    "SqlAlchemyRegistrationStore",
    "create_db_engine",
    "get_db_url",
]
