"""Task operations scoped to the requesting user."""

import logging
from typing import Any, Optional

from ..errors import AuthorizationError, NotFoundError
from ..models import DEFAULT_CATEGORY, TaskPriority
from ..schemas.task import TaskRead
from ..storage import Storage
from .sorting import sort_tasks
from .validation import validate_task_payload

logger = logging.getLogger(__name__)


class TaskService:
    """List, create, update and delete a user's tasks.

    Mutations first resolve the task's owner: a missing task is
    ``NotFoundError``, another user's task is ``AuthorizationError``. The
    check runs before any field is written, in both storage modes.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def _check_owner(self, user_id: int, task_id: int) -> None:
        owner_id = self.storage.get_task_owner(task_id)
        if owner_id is None:
            raise NotFoundError("Not found")
        if owner_id != user_id:
            logger.warning("User %s denied access to task %s", user_id, task_id)
            raise AuthorizationError("Not authorized")

    def list_tasks(self, user_id: int, sort_by: Optional[str] = None) -> list[TaskRead]:
        tasks = self.storage.list_tasks(user_id)
        return [TaskRead.model_validate(t) for t in sort_tasks(tasks, sort_by)]

    def get_task(self, user_id: int, task_id: int) -> TaskRead:
        """Single task. Tasks owned by someone else are reported as not found."""
        task = self.storage.get_task(task_id)
        if task is None or task.user_id != user_id:
            raise NotFoundError("Not found")
        return TaskRead.model_validate(task)

    def create_task(self, user_id: int, payload: Any) -> TaskRead:
        data = validate_task_payload(payload, require_title=True)
        fields = {
            "title": data["title"],
            "description": data.get("description") or "",
            "category": data.get("category") or DEFAULT_CATEGORY,
            "priority": data.get("priority") or TaskPriority.MEDIUM.value,
            "due_date": data.get("due_date"),
            "completed": data.get("completed") or 0,
        }
        task = self.storage.add_task(user_id, fields)
        logger.info("Created task %s for user %s", task.id, user_id)
        return TaskRead.model_validate(task)

    def update_task(self, user_id: int, task_id: int, payload: Any) -> TaskRead:
        """Apply a partial update; fields absent from ``payload`` are untouched."""
        changes = validate_task_payload(payload)
        self._check_owner(user_id, task_id)

        task = self.storage.update_task(task_id, changes)
        if task is None:
            # Deleted between the ownership check and the write
            raise NotFoundError("Not found")
        logger.info("Updated task %s fields=%s", task_id, sorted(changes))
        return TaskRead.model_validate(task)

    def delete_task(self, user_id: int, task_id: int) -> dict[str, bool]:
        self._check_owner(user_id, task_id)
        if not self.storage.delete_task(task_id):
            raise NotFoundError("Not found")
        logger.info("Deleted task %s", task_id)
        return {"success": True}
