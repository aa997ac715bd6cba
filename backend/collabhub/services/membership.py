"""
Role assignment across the two places a role lives: the user's
``project_roles`` map (used for authorization) and the project's embedded
``members`` list (used for display and the paginated listing).

Both writes run inside ``transaction()``. With transactions disabled they are
applied in sequence and a failure between them leaves the two copies out of
step; nothing reconciles them afterwards.
"""
import logging
import uuid
from datetime import datetime, timezone

from ..core.errors import NotFoundError, ValidationError
from ..db.mongo import db, transaction
from ..models.membership import ASSIGNABLE_ROLES, ProjectMember
from ..models.project import ProjectInDB
from .authorization import authorize

logger = logging.getLogger(__name__)


async def create_project(owner: dict, name: str, description: str) -> dict:
    """Create a project and register the creator as its owner."""
    now = datetime.now(timezone.utc)
    project = ProjectInDB(
        project_id=str(uuid.uuid4()),
        name=name,
        description=description,
        members=[ProjectMember(user_id=owner["user_id"], role="owner")],
        created_at=now,
        updated_at=now,
    ).model_dump()

    async with transaction() as session:
        await db()["projects"].insert_one(project, session=session)
        await db()["users"].update_one(
            {"user_id": owner["user_id"]},
            {"$set": {f"project_roles.{project['project_id']}": "owner", "updated_at": now}},
            session=session,
        )

    logger.info("project created project=%s owner=%s", project["project_id"], owner["user_id"])
    project.pop("_id", None)
    return project


def upsert_member(members: list[dict], user_id: str, role: str) -> list[dict]:
    """Return members with user_id set to role, updated in place or appended."""
    updated = [dict(m) for m in members]
    for member in updated:
        if member.get("user_id") == user_id:
            member["role"] = role
            return updated
    updated.append({"user_id": user_id, "role": role})
    return updated


async def approve_user(caller: dict, project_id: str, target_user_id: str, role: str) -> dict:
    """
    Grant ``role`` (editor or member) on a project to another user.

    Checks run in this order: role value (400), project exists (404), caller
    is owner (403), target user exists (404).
    """
    if role not in ASSIGNABLE_ROLES:
        raise ValidationError("Invalid role")

    project = await db()["projects"].find_one({"project_id": project_id}, {"_id": 0})
    if not project:
        raise NotFoundError("Project not found")

    await authorize(caller, project_id, "project", "approve_user")

    target = await db()["users"].find_one({"user_id": target_user_id}, {"_id": 0, "user_id": 1})
    if not target:
        raise NotFoundError("User not found")

    now = datetime.now(timezone.utc)
    members = upsert_member(project.get("members", []), target_user_id, role)

    async with transaction() as session:
        await db()["users"].update_one(
            {"user_id": target_user_id},
            {"$set": {f"project_roles.{project_id}": role, "updated_at": now}},
            session=session,
        )
        await db()["projects"].update_one(
            {"project_id": project_id},
            {"$set": {"members": members, "updated_at": now}},
            session=session,
        )

    logger.info(
        "member approved project=%s user=%s role=%s by=%s",
        project_id, target_user_id, role, caller["user_id"],
    )
    project.update(members=members, updated_at=now)
    return project
