import uuid
from fastapi import APIRouter, Depends
from datetime import datetime, timezone
from ..db.mongo import db
from ..core.errors import NotFoundError
from ..core.responses import api_response
from ..dependencies.auth import get_current_user
from ..models.content import ContentCreate, ContentInDB, ContentUpdate
from ..services.authorization import authorize

router = APIRouter(prefix="/projects/{project_id}/contents", tags=["contents"])


@router.get("")
async def list_contents(project_id: str, user=Depends(get_current_user)):
    await authorize(user, project_id, "content", "list")

    contents = []
    async for c in db()["contents"].find({"project_id": project_id}, {"_id": 0}):
        contents.append(c)
    return api_response(200, contents, "All Content Fetched Successfully")


@router.post("")
async def create_content(project_id: str, body: ContentCreate, user=Depends(get_current_user)):
    await authorize(user, project_id, "content", "create")

    now = datetime.now(timezone.utc)
    doc = ContentInDB(
        content_id=str(uuid.uuid4()),
        project_id=project_id,
        type=body.type,
        created_at=now,
        updated_at=now,
    ).model_dump()
    await db()["contents"].insert_one(doc)
    doc.pop("_id", None)
    return api_response(201, doc, "Content Created Successfully")


@router.get("/{content_id}")
async def get_content(project_id: str, content_id: str, user=Depends(get_current_user)):
    await authorize(user, project_id, "content", "get")

    content = await db()["contents"].find_one(
        {"content_id": content_id, "project_id": project_id}, {"_id": 0}
    )
    if not content:
        raise NotFoundError("Content not found")
    return api_response(200, content, "Content Fetched Successfully")


@router.put("/{content_id}")
async def update_content(project_id: str, content_id: str, body: ContentUpdate, user=Depends(get_current_user)):
    """Replace the content type with whatever was sent, null included."""
    await authorize(user, project_id, "content", "update")

    result = await db()["contents"].update_one(
        {"content_id": content_id, "project_id": project_id},
        {"$set": {"type": body.type, "updated_at": datetime.now(timezone.utc)}}
    )
    if result.matched_count == 0:
        raise NotFoundError("Content not found")

    content = await db()["contents"].find_one({"content_id": content_id}, {"_id": 0})
    return api_response(200, content, "Content Updated Successfully")


@router.delete("/{content_id}")
async def delete_content(project_id: str, content_id: str, user=Depends(get_current_user)):
    """Remove the content document. Its versions are not deleted."""
    await authorize(user, project_id, "content", "delete")

    result = await db()["contents"].delete_one({"content_id": content_id, "project_id": project_id})
    if result.deleted_count == 0:
        raise NotFoundError("Content not found")
    return api_response(200, {}, "Content Removed Successfully")
