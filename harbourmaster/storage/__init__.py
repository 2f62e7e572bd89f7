"""Storage: SQLAlchemy engine, tables, persistence gateway and review store."""

from .database import Base, create_db_engine, create_session_factory, init_db
from .gateway import EMBEDDING_SHAPES, PersistenceGateway
from .review_store import ALLOWED_TRANSITIONS, ReviewStore

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "PersistenceGateway",
    "EMBEDDING_SHAPES",
    "ReviewStore",
    "ALLOWED_TRANSITIONS",
]
