"""
SQLAlchemy session management for the library catalog.
Creates the engine, the session factory and the declarative base for the ORM models,
and provides a dependency-style generator that opens and safely closes a session.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from librarycatalog.core.config import settings


def _unicode_lower(value):
    return value.lower() if value is not None else None


def register_sqlite_functions(target: Engine) -> None:
    """
    Replaces SQLite's ASCII-only `lower()` with a Unicode-aware one on every new
    connection, so case-insensitive search also folds Cyrillic. No-op for other databases.

    Args:
        target (Engine): Engine whose connections get the function.
    """
    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target, "connect")
    def _on_connect(dbapi_conn, connection_record):
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
register_sqlite_functions(engine)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """
    Provides a database session for use as a dependency.

    Yields:
        Session: SQLAlchemy session.

    Ensures:
        The session is closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db() -> None:
    """Creates every table registered on `Base` (idempotent)."""
    from librarycatalog.models import author, book, genre, publisher  # noqa: F401
    Base.metadata.create_all(bind=engine)
