import asyncio
import os
import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

# === Configure env BEFORE any imports ===
os.environ.setdefault("MONGODB_DB_NAME", "collabhub_test")
os.environ["MONGODB_USE_TRANSACTIONS"] = "false"
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")


def run(coro):
    """Drive one coroutine against the mock database from synchronous test code."""
    return asyncio.run(coro)


@pytest.fixture(scope="session")
def app_instance():
    """Import app after environment is configured."""
    from collabhub.main import app
    return app


@pytest.fixture(autouse=True)
def mock_db(monkeypatch, tmp_path):
    """Swap MongoDB for an in-memory mock and keep uploads under tmp_path."""
    import collabhub.db.mongo as mongo_mod
    from collabhub.core.settings import settings

    mock_client = AsyncMongoMockClient()
    database = mock_client[settings.MONGODB_DB_NAME]
    monkeypatch.setattr(mongo_mod, "_client", mock_client)
    monkeypatch.setattr(mongo_mod, "_db", database)

    monkeypatch.setattr(settings, "STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.setattr(settings, "OBJECT_STORE_UPLOAD_URL", None)
    yield database


@pytest.fixture
def client(app_instance):
    """Test client; https so the secure auth cookies round-trip."""
    return TestClient(app_instance, base_url="https://testserver")


# === Seeding helpers ===
_clock = {"t": datetime(2024, 1, 1, tzinfo=timezone.utc)}


def _tick() -> datetime:
    _clock["t"] += timedelta(seconds=1)
    return _clock["t"]


@pytest.fixture
def make_user(mock_db):
    from collabhub.core.security import hash_password

    def _make(username: str, password: str = "secret123", roles: dict | None = None) -> dict:
        now = _tick()
        user = {
            "user_id": f"u_{username}",
            "username": username,
            "email": f"{username}@example.com",
            "password_hash": hash_password(password),
            "project_roles": dict(roles or {}),
            "refresh_token": None,
            "created_at": now,
            "updated_at": now,
        }
        run(mock_db["users"].insert_one(dict(user)))
        return user
    return _make


@pytest.fixture
def make_project(mock_db):
    def _make(project_id: str, members: list[dict], name: str = "Demo", description: str = "Demo project") -> dict:
        now = _tick()
        project = {
            "project_id": project_id,
            "name": name,
            "description": description,
            "members": members,
            "comments": [],
            "is_released": False,
            "created_at": now,
            "updated_at": now,
        }
        run(mock_db["projects"].insert_one(dict(project)))
        return project
    return _make


def auth_header(user: dict) -> dict:
    from collabhub.core.security import create_access_token
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def team(make_user, make_project):
    """A project with one user per role plus an outsider with no role."""
    pid = "p_demo"
    owner = make_user("owner", roles={pid: "owner"})
    editor = make_user("editor", roles={pid: "editor"})
    member = make_user("member", roles={pid: "member"})
    outsider = make_user("outsider")
    project = make_project(pid, [
        {"user_id": owner["user_id"], "role": "owner"},
        {"user_id": editor["user_id"], "role": "editor"},
        {"user_id": member["user_id"], "role": "member"},
    ])
    return {
        "project": project,
        "owner": owner,
        "editor": editor,
        "member": member,
        "outsider": outsider,
    }


@pytest.fixture
def seeded_content(mock_db, team):
    """Content c_demo in p_demo with versions v1..v3, v1 approved and at the head."""
    now = _tick()
    content = {
        "content_id": "c_demo",
        "project_id": team["project"]["project_id"],
        "type": "document",
        "versions": ["v1", "v2", "v3"],
        "created_at": now,
        "updated_at": now,
    }
    run(mock_db["contents"].insert_one(dict(content)))
    for vid in content["versions"]:
        run(mock_db["versions"].insert_one({
            "version_id": vid,
            "content_id": "c_demo",
            "uploaded_by": team["editor"]["user_id"],
            "file_path": f"/files/{vid}.pdf",
            "approved": vid == "v1",
            "created_at": now,
            "updated_at": now,
        }))
    return content
