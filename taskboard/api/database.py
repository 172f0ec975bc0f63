"""Read-only database introspection endpoints."""

import logging

from fastapi import APIRouter, Depends

from ..dependencies.services import get_storage
from ..errors import NotFoundError
from ..storage import Storage

router = APIRouter()
logger = logging.getLogger(__name__)

DESCRIBABLE_TABLES = ("users", "tasks")


@router.get("/info")
def database_info(storage: Storage = Depends(get_storage)):
    info = storage.info()
    logger.info("Database info retrieved tables=%d status=%s", len(info["tables"]), info["status"])
    return info


@router.get("/describe/{table}")
def describe_table(table: str, storage: Storage = Depends(get_storage)):
    """Column layout of the users or tasks table."""
    columns = storage.describe_table(table) if table in DESCRIBABLE_TABLES else None
    if columns is None:
        raise NotFoundError(f"Unknown table: {table}")
    return {"table": table, "columns": columns}
