"""Shared fixtures: both storage backends and an HTTP client over each."""

import pytest
from fastapi.testclient import TestClient

from taskboard.config import Settings
from taskboard.database import create_db_and_tables
from taskboard.db.session import get_engine
from taskboard.main import create_app
from taskboard.services.tasks import TaskService
from taskboard.services.users import UserService
from taskboard.storage import MemoryStorage, SQLStorage


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def sql_storage(tmp_path):
    """SQLite-backed storage in a temporary file."""
    engine = get_engine(f"sqlite:///{tmp_path / 'test.db'}")
    create_db_and_tables(engine)
    storage = SQLStorage(engine)
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    """Runs the test once per storage backend."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def users(storage):
    return UserService(storage)


@pytest.fixture
def tasks(storage):
    return TaskService(storage)


@pytest.fixture
def alice(users):
    return users.create_user("alice@x.com", "pw123456")


@pytest.fixture
def bob(users):
    return users.create_user("bob@x.com", "hunter22")


@pytest.fixture
def client(storage):
    app = create_app(settings=Settings(database_url=None), storage=storage)
    return TestClient(app)


def register_and_login(client, email="alice@x.com", password="pw123456"):
    """Register a user and return Authorization headers for it."""
    client.post("/api/auth/register", json={"email": email, "password": password})
    res = client.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
