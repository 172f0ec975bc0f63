"""Database setup and persistence mode selection for Taskboard.

The storage backend is chosen once at startup. When the database is
unreachable the API still starts, serving from memory without durability.
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from .config import Settings
from .db.session import get_engine
# Import models so they're registered with SQLModel.metadata
from .models import Task, User  # noqa: F401
from .storage import MemoryStorage, SQLStorage, Storage

logger = logging.getLogger(__name__)


def create_db_and_tables(engine: Engine) -> None:
    """Create the users and tasks tables if they do not exist."""
    SQLModel.metadata.create_all(engine)


def select_storage(settings: Settings) -> Storage:
    """Connect to the configured database or fall back to memory.

    Any failure (no URL, unreachable host, bad credentials, missing driver,
    schema creation error) selects in-memory storage and is logged; it is
    never raised.
    """
    if not settings.database_url:
        logger.warning("DATABASE_URL not set. Using in-memory storage; data will not persist.")
        return MemoryStorage()

    engine: Optional[Engine] = None
    try:
        logger.info("Connecting to database...")
        engine = get_engine(settings.database_url, pool_size=settings.db_pool_size)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        create_db_and_tables(engine)
        logger.info("Users and tasks tables ready")
    except Exception:
        logger.exception("Database initialisation failed")
        if engine is not None:
            engine.dispose()
        logger.warning("Falling back to in-memory storage. Data will not persist.")
        return MemoryStorage()

    return SQLStorage(engine)
