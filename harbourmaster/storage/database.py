"""
Database connection via SQLAlchemy.

The default URL stores a SQLite file under data/; any SQLAlchemy URL can be
configured. Engines are created explicitly and handed to the components
that need them, never held as module globals.
"""

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine with SQLite tweaks applied.

    In-memory SQLite URLs share one connection so every session sees the
    same database.
    """
    kwargs = {"echo": echo}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}  # Required for SQLite with FastAPI threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            db_path = url.split("sqlite:///", 1)[-1]
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, **kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables if they don't exist."""
    from harbourmaster.storage import tables  # noqa: F401 registers models with Base
    Base.metadata.create_all(bind=engine)
