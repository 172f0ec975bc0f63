from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ..models import TaskBase, TaskPriority

PRIORITY_VALUES = [p.value for p in TaskPriority]
FALSE_STRINGS = ("", "0", "false", "no", "off")


def parse_due_date(value: Any) -> Optional[date]:
    """Parse a calendar date from a date, datetime or ISO 8601 string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValueError("Invalid date")


class TaskPayload(BaseModel):
    """Fields a client may send for a task. Unknown keys are ignored."""
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[date] = None
    completed: Optional[int] = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v):
        # Numbers are accepted as their text form
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if v is not None and not isinstance(v, str):
            raise ValueError("Title must be a string")
        if v is None or not v.strip():
            raise ValueError("Title is required")
        if len(v.strip()) > 255:
            raise ValueError("Title must be at most 255 characters")
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, v):
        if v is not None and not isinstance(v, str):
            raise ValueError("Description must be a string")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        if v is None or v == "":
            return None
        if not isinstance(v, str):
            raise ValueError("Category must be a string")
        if len(v) > 100:
            raise ValueError("Category must be at most 100 characters")
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def check_priority(cls, v):
        if v is None or v == "":
            return None
        if v not in PRIORITY_VALUES:
            raise ValueError("Priority must be High, Medium or Low")
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, v):
        return parse_due_date(v)

    @field_validator("completed", mode="before")
    @classmethod
    def coerce_completed(cls, v):
        """Any value is accepted and coerced to 0 or 1 by truthiness."""
        if isinstance(v, str):
            return 0 if v.strip().lower() in FALSE_STRINGS else 1
        return 1 if v else 0


class TaskCreate(TaskPayload):
    # Validated even when absent so a missing title is reported
    title: Optional[str] = Field(default=None, validate_default=True)


class TaskUpdate(TaskPayload):
    """Partial update: only keys present in the request are applied."""


class TaskRead(TaskBase):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite drops the offset; stored values are always UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
