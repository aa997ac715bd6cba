from fastapi import APIRouter, Depends, File, UploadFile
from ..db.mongo import db
from ..core.responses import api_response
from ..dependencies.auth import get_current_user
from ..services.authorization import authorize
from ..services.file_storage import save_upload
from ..services.version_workflow import (
    approve_version, create_version, delete_version, get_content, get_version_with_content,
    replace_version_file,
)

router = APIRouter(tags=["versions"])


@router.get("/contents/{content_id}/versions")
async def list_versions(content_id: str, user=Depends(get_current_user)):
    content = await get_content(content_id)
    await authorize(user, content["project_id"], "version", "list")

    versions = []
    async for v in db()["versions"].find({"content_id": content_id}, {"_id": 0}):
        versions.append(v)
    return api_response(200, versions, "Versions fetched Successfully")


@router.post("/contents/{content_id}/versions")
async def create_version_endpoint(
    content_id: str,
    file: UploadFile | None = File(None),
    user=Depends(get_current_user),
):
    """Upload a new version of a content item. The upload finishes before anything is written."""
    content = await get_content(content_id)
    await authorize(user, content["project_id"], "version", "create")

    file_path = await save_upload(file)
    version = await create_version(content, user["user_id"], file_path)
    return api_response(201, {"newVersion": version}, "Version created successfully")


@router.get("/versions/{version_id}")
async def get_version(version_id: str, user=Depends(get_current_user)):
    version, content = await get_version_with_content(version_id)
    await authorize(user, content["project_id"], "version", "get")
    return api_response(200, version, "Version fetched successfully")


@router.put("/versions/{version_id}")
async def update_version(
    version_id: str,
    file: UploadFile | None = File(None),
    user=Depends(get_current_user),
):
    """Replace the version's file. A missing or failed upload stores an empty file path."""
    version, content = await get_version_with_content(version_id)
    await authorize(user, content["project_id"], "version", "update")

    file_path = await save_upload(file)
    version = await replace_version_file(version, user["user_id"], file_path)
    return api_response(200, {"version": version}, "Version updated successfully")


@router.delete("/versions/{version_id}")
async def delete_version_endpoint(version_id: str, user=Depends(get_current_user)):
    version, content = await get_version_with_content(version_id)
    await authorize(user, content["project_id"], "version", "delete")

    await delete_version(version)
    return api_response(200, {}, "Version removed successfully")


@router.post("/versions/{version_id}/approve")
async def approve_version_endpoint(version_id: str, user=Depends(get_current_user)):
    version, content = await get_version_with_content(version_id)
    await authorize(user, content["project_id"], "version", "approve")

    version = await approve_version(version, content)
    return api_response(200, {"version": version}, "Version approved successfully")
