"""Unit tests for the Task and User models."""

from datetime import date, datetime

from taskboard.models import Task, User
from taskboard.schemas.task import TaskRead


def test_task_creation_minimal():
    """Test creating a task with minimal required fields."""
    task = Task(id=1, user_id=1, title="Test Task")

    assert task.id == 1
    assert task.title == "Test Task"
    assert task.description == ""
    assert task.category == "Other"
    assert task.priority == "Medium"
    assert task.due_date is None
    assert task.completed == 0
    assert isinstance(task.created_at, datetime)
    assert isinstance(task.updated_at, datetime)


def test_task_read_serialization():
    """Test that the response schema renders dates and the completed flag."""
    task = Task(
        id=3,
        user_id=1,
        title="Buy milk",
        priority="High",
        due_date=date(2025, 1, 31),
        completed=1,
    )
    data = TaskRead.model_validate(task).model_dump(mode="json")

    assert data["id"] == 3
    assert data["user_id"] == 1
    assert data["due_date"] == "2025-01-31"
    assert data["completed"] == 1
    assert data["priority"] == "High"
    assert "created_at" in data
    assert "updated_at" in data


def test_user_defaults():
    user = User(email="a@b.c", hashed_password="x")

    assert user.token is None
    assert user.phone == ""
    assert isinstance(user.created_at, datetime)
