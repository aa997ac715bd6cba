import logging
import uuid
from pathlib import Path

import aiofiles
import httpx
from fastapi import UploadFile

from ..core.settings import settings

logger = logging.getLogger(__name__)


def _safe_name(filename: str) -> str:
    """Prefix with a random id so uploads never overwrite each other."""
    return f"{uuid.uuid4().hex}_{Path(filename).name}"


async def _upload_to_object_store(filename: str, content: bytes, content_type: str | None) -> str:
    async with httpx.AsyncClient(timeout=settings.OBJECT_STORE_TIMEOUT) as client:
        response = await client.post(
            settings.OBJECT_STORE_UPLOAD_URL,
            files={"file": (filename, content, content_type or "application/octet-stream")},
        )
        response.raise_for_status()
        payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError(f"object store returned {type(payload).__name__}, expected an object")
    url = payload.get("secure_url") or payload.get("url")
    if not isinstance(url, str) or not url:
        raise ValueError("object store response has no url")
    return url


async def _save_local(filename: str, content: bytes) -> str:
    storage = Path(settings.STORAGE_DIR).resolve()
    storage.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(storage / filename, "wb") as f:
        await f.write(content)
    return f"{settings.PUBLIC_FILE_BASE_URL.rstrip('/')}/{filename}"


async def save_upload(file: UploadFile | None) -> str:
    """
    Store an uploaded file and return its URL.

    Returns "" when no file was sent or the upload failed; callers cannot
    tell the two apart.
    """
    if file is None or not file.filename:
        return ""

    try:
        content = await file.read()
        name = _safe_name(file.filename)
        if settings.OBJECT_STORE_UPLOAD_URL:
            url = await _upload_to_object_store(name, content, file.content_type)
        else:
            url = await _save_local(name, content)
    except (OSError, httpx.HTTPError, ValueError) as e:
        logger.warning("file upload failed filename=%s error=%s", file.filename, e)
        return ""

    logger.info("file stored filename=%s url=%s", file.filename, url)
    return url
