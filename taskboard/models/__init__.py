"""Models package."""
from .user import User, utcnow
from .task import Task, TaskBase, TaskPriority, PRIORITY_RANK, UNRANKED, DEFAULT_CATEGORY

__all__ = [
    "User",
    "Task",
    "TaskBase",
    "TaskPriority",
    "PRIORITY_RANK",
    "UNRANKED",
    "DEFAULT_CATEGORY",
    "utcnow",
]
