"""In-memory storage used when no database is reachable.

Nothing is persisted across restarts. All collections are owned by one
``MemoryStorage`` instance and guarded by a lock, since FastAPI runs sync
endpoints on a thread pool.
"""

import logging
import threading
from typing import Any, Optional

from sqlmodel import SQLModel

from ..errors import ConflictError
from ..models import Task, User, utcnow
from .base import MEMORY_MODE, TASK_MUTABLE_FIELDS, Storage

logger = logging.getLogger(__name__)


def _copy(record):
    """Detached copy so callers never mutate stored records."""
    return type(record)(**record.model_dump())


class MemoryStorage(Storage):
    mode = MEMORY_MODE

    def __init__(self):
        self._lock = threading.RLock()
        self._users: list[User] = []
        self._tasks: list[Task] = []
        self._next_user_id = 1
        self._next_task_id = 1

    # ---- users ----

    def _find_user(self, predicate) -> Optional[User]:
        with self._lock:
            for user in self._users:
                if predicate(user):
                    return _copy(user)
        return None

    def add_user(self, email: str, hashed_password: str, phone: Optional[str] = "") -> User:
        with self._lock:
            if any(u.email == email for u in self._users):
                raise ConflictError("Email already registered")
            now = utcnow()
            user = User(
                id=self._next_user_id,
                email=email,
                phone=phone or "",
                hashed_password=hashed_password,
                token=None,
                created_at=now,
                updated_at=now,
            )
            self._next_user_id += 1
            self._users.append(user)
            logger.debug("User added id=%s (memory)", user.id)
            return _copy(user)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self._find_user(lambda u: u.id == user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._find_user(lambda u: u.email == email)

    def get_user_by_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        return self._find_user(lambda u: u.token == token)

    def set_user_token(self, user_id: int, token: str) -> Optional[User]:
        with self._lock:
            for user in self._users:
                if user.id == user_id:
                    user.token = token
                    user.updated_at = utcnow()
                    return _copy(user)
        return None

    # ---- tasks ----

    def _index_of(self, task_id: int) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return -1

    def list_tasks(self, user_id: int) -> list[Task]:
        with self._lock:
            owned = [_copy(t) for t in self._tasks if t.user_id == user_id]
        return sorted(owned, key=lambda t: t.id, reverse=True)

    def get_task(self, task_id: int) -> Optional[Task]:
        with self._lock:
            idx = self._index_of(task_id)
            return _copy(self._tasks[idx]) if idx >= 0 else None

    def get_task_owner(self, task_id: int) -> Optional[int]:
        with self._lock:
            idx = self._index_of(task_id)
            return self._tasks[idx].user_id if idx >= 0 else None

    def add_task(self, user_id: int, fields: dict[str, Any]) -> Task:
        with self._lock:
            now = utcnow()
            values = {k: v for k, v in fields.items() if k in TASK_MUTABLE_FIELDS}
            task = Task(
                id=self._next_task_id,
                user_id=user_id,
                created_at=now,
                updated_at=now,
                **values,
            )
            self._next_task_id += 1
            self._tasks.append(task)
            logger.debug("Task added id=%s user=%s (memory)", task.id, user_id)
            return _copy(task)

    def update_task(self, task_id: int, changes: dict[str, Any]) -> Optional[Task]:
        with self._lock:
            idx = self._index_of(task_id)
            if idx < 0:
                return None
            task = self._tasks[idx]
            for key, value in changes.items():
                if key in TASK_MUTABLE_FIELDS:
                    setattr(task, key, value)
            task.updated_at = utcnow()
            return _copy(task)

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            idx = self._index_of(task_id)
            if idx < 0:
                return False
            del self._tasks[idx]
            return True

    # ---- introspection ----

    def info(self) -> dict[str, Any]:
        return {
            "databases": [],
            "tables": [f"{name} (in-memory)" for name in SQLModel.metadata.tables],
            "status": "Using in-memory stores",
        }

    def describe_table(self, table: str) -> Optional[list[dict[str, Any]]]:
        meta = SQLModel.metadata.tables.get(table)
        if meta is None:
            return None
        columns = []
        for column in meta.columns:
            columns.append({
                "name": column.name,
                "type": str(column.type),
                "nullable": bool(column.nullable),
                "primary_key": bool(column.primary_key),
                "default": None,
            })
        return columns
