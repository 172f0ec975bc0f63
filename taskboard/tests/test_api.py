"""HTTP-level tests through FastAPI's TestClient, over both storage backends."""

from fastapi.testclient import TestClient

from taskboard import main
from taskboard.config import Settings
from taskboard.main import create_app
from taskboard.storage import MemoryStorage
from taskboard.tests.conftest import register_and_login


class TestAuthEndpoints:

    def test_register(self, client):
        res = client.post("/api/auth/register", json={"email": "alice@x.com", "password": "pw123456"})

        assert res.status_code == 201
        body = res.json()
        assert set(body) == {"id", "email", "phone"}
        assert body["email"] == "alice@x.com"

    def test_register_missing_fields(self, client):
        res = client.post("/api/auth/register", json={"email": "alice@x.com"})

        assert res.status_code == 400
        assert res.json()["error"] == "email and password required"

    def test_register_duplicate_email(self, client):
        payload = {"email": "alice@x.com", "password": "pw123456"}
        client.post("/api/auth/register", json=payload)
        res = client.post("/api/auth/register", json=payload)

        assert res.status_code == 400
        assert res.json()["error"] == "Email already registered"

    def test_login(self, client):
        client.post("/api/auth/register", json={"email": "alice@x.com", "password": "pw123456"})
        res = client.post("/api/auth/login", json={"email": "alice@x.com", "password": "pw123456"})

        assert res.status_code == 200
        body = res.json()
        assert len(body["token"]) == 48
        assert body["user"]["email"] == "alice@x.com"
        assert set(body["user"]) == {"id", "email"}

    def test_login_invalid_credentials(self, client):
        client.post("/api/auth/register", json={"email": "alice@x.com", "password": "pw123456"})
        res = client.post("/api/auth/login", json={"email": "alice@x.com", "password": "wrong"})

        assert res.status_code == 401
        assert res.json() == {"error": "Invalid credentials"}

    def test_me(self, client):
        headers = register_and_login(client)
        res = client.get("/api/auth/me", headers=headers)

        assert res.status_code == 200
        assert res.json()["user"]["email"] == "alice@x.com"
        assert "hashed_password" not in res.json()["user"]

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401
        assert client.get("/api/auth/me", headers={"Authorization": "Bearer nope"}).status_code == 401
        assert client.get("/api/auth/me", headers={"Authorization": "Token abc"}).status_code == 401

    def test_relogin_invalidates_old_token(self, client):
        old = register_and_login(client)
        new = register_and_login(client)

        assert client.get("/api/auth/validate", headers=old).status_code == 401
        assert client.get("/api/auth/validate", headers=new).status_code == 200

    def test_logout_acknowledges(self, client):
        headers = register_and_login(client)
        assert client.post("/api/auth/logout", headers=headers).json() == {"success": True}


class TestTaskEndpoints:

    def test_requires_auth(self, client):
        assert client.get("/api/tasks").status_code == 401
        assert client.post("/api/tasks", json={"title": "x"}).status_code == 401

    def test_end_to_end(self, client):
        headers = register_and_login(client)

        res = client.post("/api/tasks", json={"title": "Buy milk", "priority": "High"}, headers=headers)
        assert res.status_code == 201
        task_id = res.json()["id"]

        listed = client.get("/api/tasks", headers=headers).json()
        assert len(listed) == 1
        assert listed[0]["priority"] == "High"
        assert listed[0]["completed"] == 0
        assert listed[0]["category"] == "Other"

        res = client.put(f"/api/tasks/{task_id}", json={"completed": 1}, headers=headers)
        assert res.status_code == 200
        assert res.json()["completed"] == 1
        assert res.json()["title"] == "Buy milk"

        res = client.delete(f"/api/tasks/{task_id}", headers=headers)
        assert res.status_code == 200
        assert res.json() == {"success": True}

        assert client.get(f"/api/tasks/{task_id}", headers=headers).status_code == 404

    def test_validation_errors_reported_together(self, client):
        headers = register_and_login(client)
        res = client.post("/api/tasks", json={"priority": "Urgent"}, headers=headers)

        assert res.status_code == 400
        errors = res.json()["errors"]
        assert "title" in errors
        assert "priority" in errors

    def test_update_validation(self, client):
        headers = register_and_login(client)
        task_id = client.post("/api/tasks", json={"title": "t"}, headers=headers).json()["id"]
        res = client.put(f"/api/tasks/{task_id}", json={"due_date": "31/31/2025"}, headers=headers)

        assert res.status_code == 400
        assert res.json()["errors"] == {"due_date": "Invalid date"}

    def test_due_date_round_trip(self, client):
        headers = register_and_login(client)
        res = client.post("/api/tasks", json={"title": "t", "due_date": "2025-03-04"}, headers=headers)

        assert res.json()["due_date"] == "2025-03-04"

    def test_sort_query(self, client):
        headers = register_and_login(client)
        for title, priority in (("a", "Low"), ("b", "High"), ("c", "Medium")):
            client.post("/api/tasks", json={"title": title, "priority": priority}, headers=headers)

        by_priority = client.get("/api/tasks", params={"sort": "priority"}, headers=headers).json()
        assert [t["title"] for t in by_priority] == ["b", "c", "a"]

        default = client.get("/api/tasks", headers=headers).json()
        assert [t["title"] for t in default] == ["c", "b", "a"]

    def test_other_user_gets_403_and_404(self, client):
        alice = register_and_login(client, "alice@x.com")
        bob = register_and_login(client, "bob@x.com")
        task_id = client.post("/api/tasks", json={"title": "Alice's"}, headers=alice).json()["id"]

        assert client.put(f"/api/tasks/{task_id}", json={"title": "Bob's"}, headers=bob).status_code == 403
        assert client.delete(f"/api/tasks/{task_id}", headers=bob).status_code == 403
        assert client.get(f"/api/tasks/{task_id}", headers=bob).status_code == 404
        assert client.get(f"/api/tasks/{task_id}", headers=alice).json()["title"] == "Alice's"

    def test_missing_task(self, client):
        headers = register_and_login(client)

        assert client.put("/api/tasks/999", json={"title": "x"}, headers=headers).status_code == 404
        assert client.delete("/api/tasks/999", headers=headers).status_code == 404

    def test_non_integer_id(self, client):
        headers = register_and_login(client)
        res = client.get("/api/tasks/abc", headers=headers)

        assert res.status_code == 400
        assert "task_id" in res.json()["errors"]


class TestServiceEndpoints:

    def test_root_lists_endpoints(self, client):
        body = client.get("/").json()
        assert body["endpoints"]["tasks"]["list"] == "GET /api/tasks"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_ready_reports_storage(self, client, storage):
        assert client.get("/ready").json()["storage"] == storage.mode

    def test_db_describe(self, client):
        res = client.get("/api/db/describe/users")
        assert res.status_code == 200
        names = [c["name"] for c in res.json()["columns"]]
        assert "email" in names

        assert client.get("/api/db/describe/secrets").status_code == 404

    def test_db_info(self, client):
        body = client.get("/api/db/info").json()
        assert "status" in body


class BrokenStorage(MemoryStorage):
    def list_tasks(self, user_id):
        raise RuntimeError("storage went away")


class TestUnexpectedErrors:

    def test_unhandled_error_returns_500(self):
        app = create_app(settings=Settings(database_url=None), storage=BrokenStorage())
        client = TestClient(app, raise_server_exceptions=False)
        headers = register_and_login(client)

        res = client.get("/api/tasks", headers=headers)

        assert res.status_code == 500
        assert res.json() == {"error": "Internal server error"}


class TestLifespan:

    def test_startup_configures_logging(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: calls.append(args))
        settings = Settings(database_url=None, log_level="DEBUG", log_file=None)

        with TestClient(create_app(settings=settings)) as client:
            assert client.get("/ready").json()["storage"] == "memory"

        assert calls == [("DEBUG", None)]
