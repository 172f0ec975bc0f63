from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field, SQLModel

from .user import utcnow


class TaskPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Sort rank per priority; anything else sorts after these
PRIORITY_RANK = {
    TaskPriority.HIGH.value: 1,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.LOW.value: 3,
}
UNRANKED = 99

DEFAULT_CATEGORY = "Other"


class TaskBase(SQLModel):
    """Fields shared by the table model and the response schema.

    Attributes:
        title: Task title (required, non-empty)
        description: Free text, empty by default
        category: Free-form label (Work, Personal, Home, Other...)
        priority: High, Medium or Low
        due_date: Calendar date without a time component
        completed: 0 or 1
    """
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default="", sa_type=Text)
    category: Optional[str] = Field(default=DEFAULT_CATEGORY, max_length=100)
    priority: Optional[str] = Field(default=TaskPriority.MEDIUM.value, max_length=20)
    due_date: Optional[date] = Field(default=None)
    completed: int = Field(default=0)


class Task(TaskBase, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<Task {self.id}: {(self.title or '')[:50]}>"
