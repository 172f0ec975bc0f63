"""Tests for persistence mode selection and the relational schema."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from taskboard.config import Settings
from taskboard.database import select_storage
from taskboard.db.session import is_memory_sqlite
from taskboard.models import User, utcnow
from taskboard.services.tasks import TaskService
from taskboard.services.users import UserService
from taskboard.storage import DATABASE_MODE, MEMORY_MODE, MemoryStorage, SQLStorage


def test_no_url_selects_memory(caplog):
    with caplog.at_level(logging.WARNING, logger="taskboard.database"):
        storage = select_storage(Settings(database_url=None))

    assert isinstance(storage, MemoryStorage)
    assert storage.mode == MEMORY_MODE
    assert "in-memory" in caplog.text


def test_unreachable_database_falls_back(tmp_path, caplog):
    url = f"sqlite:///{tmp_path / 'missing-dir' / 'db.sqlite'}"
    with caplog.at_level(logging.WARNING, logger="taskboard.database"):
        storage = select_storage(Settings(database_url=url))

    assert isinstance(storage, MemoryStorage)
    assert "Falling back" in caplog.text


def test_unknown_driver_falls_back():
    storage = select_storage(Settings(database_url="nosuchdialect://user:pw@host/db"))
    assert isinstance(storage, MemoryStorage)


def test_sqlite_selects_database(tmp_path):
    storage = select_storage(Settings(database_url=f"sqlite:///{tmp_path / 'app.db'}"))
    try:
        assert isinstance(storage, SQLStorage)
        assert storage.mode == DATABASE_MODE
        assert set(storage.info()["tables"]) >= {"users", "tasks"}
    finally:
        storage.close()


def test_schema_creation_is_idempotent(tmp_path):
    url = f"sqlite:///{tmp_path / 'app.db'}"
    first = select_storage(Settings(database_url=url))
    user = first.add_user("keep@x.com", "digest")
    first.close()

    second = select_storage(Settings(database_url=url))
    try:
        assert isinstance(second, SQLStorage)
        assert second.get_user_by_email("keep@x.com").id == user.id
    finally:
        second.close()


def test_deleting_user_cascades_to_tasks(sql_storage):
    user = sql_storage.add_user("gone@x.com", "digest")
    task = sql_storage.add_task(user.id, {"title": "Orphan"})

    with Session(sql_storage.engine) as session:
        session.delete(session.get(User, user.id))
        session.commit()

    assert sql_storage.get_task(task.id) is None


def test_pool_size_clamped():
    assert Settings(db_pool_size=0).db_pool_size == 1
    assert Settings(db_pool_size=5).db_pool_size == 5


def test_in_memory_sqlite_shared_across_threads():
    storage = select_storage(Settings(database_url="sqlite://"))
    try:
        assert isinstance(storage, SQLStorage)
        assert isinstance(storage.engine.pool, StaticPool)

        with ThreadPoolExecutor(max_workers=1) as pool:
            user = pool.submit(storage.add_user, "thread@x.com", "digest").result()

        assert storage.get_user_by_email("thread@x.com").id == user.id
    finally:
        storage.close()


@pytest.mark.parametrize("url,expected", [
    ("sqlite://", True),
    ("sqlite:///:memory:", True),
    ("sqlite:///file:shared?mode=memory&uri=true", True),
    ("sqlite:///app.db", False),
    ("mysql+pymysql://u:p@host/db", False),
])
def test_is_memory_sqlite(url, expected):
    assert is_memory_sqlite(url) is expected


def test_timestamps_are_utc_aware(tmp_path):
    assert utcnow().tzinfo is not None

    storage = select_storage(Settings(database_url=f"sqlite:///{tmp_path / 'app.db'}"))
    try:
        users = UserService(storage)
        owner = users.create_user("time@x.com", "pw123456")
        task = TaskService(storage).create_task(owner.id, {"title": "Clock"})

        assert task.created_at.tzinfo is not None
        assert task.updated_at.utcoffset() == timedelta(0)
        assert users.find_user_by_id(owner.id).created_at is not None
    finally:
        storage.close()
