import io

import pytest

from conftest import auth_header, run
from collabhub.services.authorization import CAPABILITIES, get_project_role, is_allowed
from collabhub.services.membership import upsert_member


@pytest.mark.parametrize("resource,action,allowed", [
    ("content", "list", {"owner", "editor", "member"}),
    ("content", "get", {"owner", "editor", "member"}),
    ("content", "create", {"owner", "editor"}),
    ("content", "update", {"owner"}),
    ("content", "delete", {"owner"}),
    ("version", "list", {"owner", "editor", "member"}),
    ("version", "get", {"owner", "editor", "member"}),
    ("version", "create", {"owner", "editor"}),
    ("version", "update", {"owner", "editor"}),
    ("version", "delete", {"owner"}),
    ("version", "approve", {"owner"}),
    ("project", "approve_user", {"owner"}),
    ("project", "update", {"owner"}),
    ("project", "delete", {"owner"}),
])
def test_capability_table(resource, action, allowed):
    for role in ("owner", "editor", "member"):
        assert is_allowed(role, resource, action) == (role in allowed)
    assert not is_allowed(None, resource, action)


def test_unknown_action_is_a_programming_error():
    with pytest.raises(KeyError):
        is_allowed("owner", "project", "create")


def test_every_capability_excludes_missing_role():
    assert all(None not in roles for roles in CAPABILITIES.values())


def test_get_project_role_reads_registry(team):
    assert run(get_project_role("u_owner", "p_demo")) == "owner"
    assert run(get_project_role("u_outsider", "p_demo")) is None
    assert run(get_project_role("u_ghost", "p_demo")) is None


def test_outsider_is_denied_every_guarded_action(client, team, seeded_content, mock_db):
    headers = auth_header(team["outsider"])
    upload = {"file": ("x.pdf", io.BytesIO(b"x"), "application/pdf")}
    calls = [
        ("get", "/projects/p_demo/contents", {}),
        ("post", "/projects/p_demo/contents", {"json": {"type": "doc"}}),
        ("get", "/projects/p_demo/contents/c_demo", {}),
        ("put", "/projects/p_demo/contents/c_demo", {"json": {"type": "doc"}}),
        ("delete", "/projects/p_demo/contents/c_demo", {}),
        ("get", "/contents/c_demo/versions", {}),
        ("post", "/contents/c_demo/versions", {"files": upload}),
        ("get", "/versions/v1", {}),
        ("put", "/versions/v1", {}),
        ("delete", "/versions/v1", {}),
        ("post", "/versions/v1/approve", {}),
        ("patch", "/projects/p_demo", {"json": {"name": "x"}}),
        ("delete", "/projects/p_demo", {}),
        ("post", "/projects/p_demo/members", {"json": {"user_id": "u_outsider", "role": "editor"}}),
    ]
    for method, url, kwargs in calls:
        r = getattr(client, method)(url, headers=headers, **kwargs)
        assert r.status_code == 403, (method, url, r.text)
        assert r.json()["message"] == "Permission Denied"

    # Nothing was written along the way
    assert run(mock_db["contents"].count_documents({})) == 1
    assert run(mock_db["versions"].count_documents({})) == 3
    assert run(mock_db["projects"].find_one({"project_id": "p_demo"}))["name"] == "Demo"


def test_upsert_member():
    members = [{"user_id": "u1", "role": "owner"}, {"user_id": "u2", "role": "member"}]
    assert upsert_member(members, "u2", "editor") == [
        {"user_id": "u1", "role": "owner"},
        {"user_id": "u2", "role": "editor"},
    ]
    assert upsert_member(members, "u3", "member")[-1] == {"user_id": "u3", "role": "member"}
    # input is left untouched
    assert members[1]["role"] == "member"
