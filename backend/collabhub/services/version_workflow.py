import logging
import uuid
from datetime import datetime, timezone

from ..core.errors import NotFoundError
from ..db.mongo import db, transaction
from ..models.version import VersionInDB

logger = logging.getLogger(__name__)


async def get_content(content_id: str) -> dict:
    content = await db()["contents"].find_one({"content_id": content_id}, {"_id": 0})
    if not content:
        raise NotFoundError("Content not found")
    return content


async def get_version_with_content(version_id: str) -> tuple[dict, dict]:
    """Load a version and the content it belongs to, 404 if either is missing."""
    version = await db()["versions"].find_one({"version_id": version_id}, {"_id": 0})
    if not version:
        raise NotFoundError("Version not found")
    content = await get_content(version["content_id"])
    return version, content


async def create_version(content: dict, uploader_id: str, file_path: str) -> dict:
    """Insert a version and append its id to the content's version list."""
    now = datetime.now(timezone.utc)
    version = VersionInDB(
        version_id=str(uuid.uuid4()),
        content_id=content["content_id"],
        uploaded_by=uploader_id,
        file_path=file_path,
        created_at=now,
        updated_at=now,
    ).model_dump()

    async with transaction() as session:
        await db()["versions"].insert_one(version, session=session)
        await db()["contents"].update_one(
            {"content_id": content["content_id"]},
            {"$push": {"versions": version["version_id"]}, "$set": {"updated_at": now}},
            session=session,
        )

    version.pop("_id", None)
    return version


async def replace_version_file(version: dict, uploader_id: str, file_path: str) -> dict:
    """Overwrite uploader and file path; an empty file_path is stored as is."""
    now = datetime.now(timezone.utc)
    await db()["versions"].update_one(
        {"version_id": version["version_id"]},
        {"$set": {"uploaded_by": uploader_id, "file_path": file_path, "updated_at": now}},
    )
    return {**version, "uploaded_by": uploader_id, "file_path": file_path, "updated_at": now}


async def delete_version(version: dict) -> None:
    """Remove a version and drop its id from the content's version list."""
    async with transaction() as session:
        await db()["versions"].delete_one({"version_id": version["version_id"]}, session=session)
        await db()["contents"].update_one(
            {"content_id": version["content_id"]},
            {"$pull": {"versions": version["version_id"]}},
            session=session,
        )


async def approve_version(version: dict, content: dict) -> dict:
    """
    Mark one version as the approved version of its content.

    The version id moves to the head of the content's list (index 0 means
    most recently approved), every other version of the content loses its
    approved flag, and the target gains it. The stored list is reordered, not
    the copy in `content`.
    """
    now = datetime.now(timezone.utc)

    async with transaction() as session:
        await db()["versions"].update_many(
            {"content_id": content["content_id"]},
            {"$set": {"approved": False}},
            session=session,
        )
        await db()["versions"].update_one(
            {"version_id": version["version_id"]},
            {"$set": {"approved": True, "updated_at": now}},
            session=session,
        )
        await db()["contents"].update_one(
            {"content_id": content["content_id"]},
            {"$pull": {"versions": version["version_id"]}},
            session=session,
        )
        await db()["contents"].update_one(
            {"content_id": content["content_id"]},
            {
                "$push": {"versions": {"$each": [version["version_id"]], "$position": 0}},
                "$set": {"updated_at": now},
            },
            session=session,
        )

    logger.info("version approved version=%s content=%s", version["version_id"], content["content_id"])
    return {**version, "approved": True, "updated_at": now}
