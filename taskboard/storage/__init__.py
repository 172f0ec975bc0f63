"""Storage backends."""
from .base import Storage, DATABASE_MODE, MEMORY_MODE, TASK_MUTABLE_FIELDS
from .memory import MemoryStorage
from .sql import SQLStorage

__all__ = [
    "Storage",
    "MemoryStorage",
    "SQLStorage",
    "DATABASE_MODE",
    "MEMORY_MODE",
    "TASK_MUTABLE_FIELDS",
]
