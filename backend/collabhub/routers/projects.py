import logging
import math
from fastapi import APIRouter, Depends, Query
from datetime import datetime, timezone
from ..db.mongo import db
from ..core.errors import NotFoundError
from ..core.responses import api_response, public_user
from ..dependencies.auth import get_current_user
from ..models.membership import MemberApprove
from ..models.project import ProjectCreate, ProjectUpdate
from ..services.authorization import authorize
from ..services.membership import approve_user, create_project

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def project_listing_pipeline(page: int, limit: int) -> list[dict]:
    """
    Join each project's members with their user records, then regroup so every
    project carries its members and the matching memberDetails side by side.
    Projects whose members resolve to no user record drop out of the listing.
    """
    return [
        {"$sort": {"created_at": 1, "project_id": 1}},
        {"$unwind": "$members"},
        {"$lookup": {
            "from": "users",
            "localField": "members.user_id",
            "foreignField": "user_id",
            "as": "memberDetails",
        }},
        {"$unwind": "$memberDetails"},
        {"$group": {
            "_id": "$project_id",
            "name": {"$first": "$name"},
            "description": {"$first": "$description"},
            "is_released": {"$first": "$is_released"},
            "created_at": {"$first": "$created_at"},
            "members": {"$push": "$members"},
            "memberDetails": {"$push": "$memberDetails"},
        }},
        {"$sort": {"created_at": 1, "_id": 1}},
        {"$skip": (page - 1) * limit},
        {"$limit": limit},
    ]


@router.get("")
async def list_projects(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    user=Depends(get_current_user),
):
    """Page through all projects with member details resolved."""
    projects = []
    async for p in db()["projects"].aggregate(project_listing_pipeline(page, limit)):
        p["project_id"] = p.pop("_id")
        p["memberDetails"] = [public_user(u) for u in p.get("memberDetails", [])]
        projects.append(p)

    # Counted separately from the page, so totals reflect the whole collection
    total_projects = await db()["projects"].count_documents({})
    total_pages = math.ceil(total_projects / limit)

    data = {
        "projects": projects,
        "page": page,
        "totalPages": total_pages,
        "totalProjects": total_projects,
    }
    return api_response(200, data, "Projects fetched successfully")


@router.post("")
async def create_project_endpoint(body: ProjectCreate, user=Depends(get_current_user)):
    """Create a new project. The creator becomes its owner."""
    project = await create_project(user, body.name, body.description)
    return api_response(201, {"project": project}, "Project Created Successfully")


@router.get("/{project_id}")
async def get_project(project_id: str, user=Depends(get_current_user)):
    """Get project details. Open to any authenticated user."""
    project = await db()["projects"].find_one({"project_id": project_id}, {"_id": 0})
    if not project:
        raise NotFoundError("Project not found")
    return api_response(200, project, "Project fetched successfully")


@router.post("/{project_id}/members")
async def approve_member(project_id: str, body: MemberApprove, user=Depends(get_current_user)):
    """Add a user to the project as editor or member, or change their role. Owner only."""
    project = await approve_user(user, project_id, body.user_id, body.role)
    return api_response(200, {"project": project}, "User added and updated in project successfully")


@router.patch("/{project_id}")
async def update_project(project_id: str, body: ProjectUpdate, user=Depends(get_current_user)):
    """Update project details. Omitted or empty fields keep their stored value."""
    await authorize(user, project_id, "project", "update")

    project = await db()["projects"].find_one({"project_id": project_id}, {"_id": 0})
    if not project:
        raise NotFoundError("Project not found")

    update_data = {
        "name": body.name or project["name"],
        "description": body.description or project["description"],
        "updated_at": datetime.now(timezone.utc),
    }
    await db()["projects"].update_one(
        {"project_id": project_id},
        {"$set": update_data}
    )
    project.update(update_data)
    return api_response(200, {"project": project}, "Project updated successfully")


@router.delete("/{project_id}")
async def delete_project(project_id: str, user=Depends(get_current_user)):
    """
    Delete the project document only. Contents, versions and role entries
    that reference it are left in place.
    """
    await authorize(user, project_id, "project", "delete")

    result = await db()["projects"].delete_one({"project_id": project_id})
    if result.deleted_count == 0:
        raise NotFoundError("Project not found")

    logger.info("project deleted project=%s by=%s", project_id, user["user_id"])
    return api_response(200, {}, "Project deleted successfully")
