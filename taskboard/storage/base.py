"""Storage interface shared by the database and in-memory backends."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..models import Task, User

DATABASE_MODE = "database"
MEMORY_MODE = "memory"

# Columns a caller may set on a task after creation
TASK_MUTABLE_FIELDS = ("title", "description", "category", "priority", "due_date", "completed")


class Storage(ABC):
    """Persistence for users and their tasks.

    Implementations persist every call immediately. Lookups return ``None``
    for absent records instead of raising.
    """

    mode: str

    # ---- users ----

    @abstractmethod
    def add_user(self, email: str, hashed_password: str, phone: Optional[str] = "") -> User:
        """Insert a user. Raises ConflictError if the email is taken."""

    @abstractmethod
    def get_user_by_id(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_token(self, token: str) -> Optional[User]:
        ...

    @abstractmethod
    def set_user_token(self, user_id: int, token: str) -> Optional[User]:
        """Overwrite the user's token and return the refreshed record."""

    # ---- tasks ----

    @abstractmethod
    def list_tasks(self, user_id: int) -> list[Task]:
        """All tasks owned by ``user_id``, newest id first."""

    @abstractmethod
    def get_task(self, task_id: int) -> Optional[Task]:
        ...

    @abstractmethod
    def get_task_owner(self, task_id: int) -> Optional[int]:
        """Owning user id, or None if the task does not exist."""

    @abstractmethod
    def add_task(self, user_id: int, fields: dict[str, Any]) -> Task:
        ...

    @abstractmethod
    def update_task(self, task_id: int, changes: dict[str, Any]) -> Optional[Task]:
        """Apply ``changes`` and refresh ``updated_at``. None if the task is gone."""

    @abstractmethod
    def delete_task(self, task_id: int) -> bool:
        """Hard delete. False if the task did not exist."""

    # ---- introspection ----

    @abstractmethod
    def info(self) -> dict[str, Any]:
        """Databases, tables and a status line."""

    @abstractmethod
    def describe_table(self, table: str) -> Optional[list[dict[str, Any]]]:
        """Column descriptions for ``table``, or None if it is unknown."""

    def close(self) -> None:
        return
