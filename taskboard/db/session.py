"""Database engine construction for Taskboard."""

import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def is_memory_sqlite(database_url: str) -> bool:
    """True for SQLite URLs whose database lives only in the connection."""
    if not database_url.startswith("sqlite"):
        return False
    _, _, path = database_url.partition("://")
    return path in ("", "/") or ":memory:" in path or "mode=memory" in path


def get_engine(database_url: str, pool_size: int = 10, echo: bool = False) -> Engine:
    """Create the database engine for ``database_url``.

    Server databases get a fixed pool of ``pool_size`` connections with no
    overflow. Callers wait for a free connection without a timeout.
    SQLite engines enforce foreign keys so task rows cascade with users.
    In-memory SQLite shares one connection across threads so every
    request sees the same database.
    """
    if database_url.startswith("sqlite"):
        options = {}
        if is_memory_sqlite(database_url):
            options["poolclass"] = StaticPool
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            **options,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(
            database_url,
            echo=echo,
            pool_size=max(1, pool_size),
            max_overflow=0,
            pool_timeout=None,
            pool_pre_ping=True,
        )
    logger.debug("Engine created dialect=%s pool=%s", engine.dialect.name, type(engine.pool).__name__)
    return engine
