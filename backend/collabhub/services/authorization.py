"""
Project-scoped authorization.

Every guarded action is looked up in CAPABILITIES and compared with the
caller's role for the project, read fresh from the user's ``project_roles``
map. A user with no entry for the project has role ``None``, which is in no
allowed set, so the action is denied.
"""
import logging

from ..core.errors import PermissionDeniedError
from ..db.mongo import db

logger = logging.getLogger(__name__)

ALL_ROLES = frozenset({"owner", "editor", "member"})
WRITERS = frozenset({"owner", "editor"})
OWNER_ONLY = frozenset({"owner"})

# (resource, action) -> roles allowed to perform it.
# Project create/get/list are open to any authenticated user and have no entry.
CAPABILITIES = {
    ("content", "list"): ALL_ROLES,
    ("content", "get"): ALL_ROLES,
    ("content", "create"): WRITERS,
    ("content", "update"): OWNER_ONLY,
    ("content", "delete"): OWNER_ONLY,
    ("version", "list"): ALL_ROLES,
    ("version", "get"): ALL_ROLES,
    ("version", "create"): WRITERS,
    ("version", "update"): WRITERS,
    ("version", "delete"): OWNER_ONLY,
    ("version", "approve"): OWNER_ONLY,
    ("project", "approve_user"): OWNER_ONLY,
    ("project", "update"): OWNER_ONLY,
    ("project", "delete"): OWNER_ONLY,
}


async def get_project_role(user_id: str, project_id: str) -> str | None:
    """Return the user's role in the project, or None when there is none."""
    user = await db()["users"].find_one({"user_id": user_id}, {"_id": 0, "project_roles": 1})
    if not user:
        return None
    return (user.get("project_roles") or {}).get(str(project_id))


def is_allowed(role: str | None, resource: str, action: str) -> bool:
    allowed = CAPABILITIES.get((resource, action))
    if allowed is None:
        raise KeyError(f"No capability defined for {resource}.{action}")
    return role in allowed


async def authorize(user: dict, project_id: str, resource: str, action: str) -> str:
    """Raise PermissionDeniedError unless the caller's role allows the action. Returns the role."""
    role = await get_project_role(user["user_id"], project_id)
    if not is_allowed(role, resource, action):
        logger.info(
            "permission denied user=%s project=%s action=%s.%s role=%s",
            user["user_id"], project_id, resource, action, role,
        )
        raise PermissionDeniedError("Permission Denied")
    return role
