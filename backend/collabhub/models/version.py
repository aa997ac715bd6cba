from pydantic import BaseModel
from datetime import datetime

class VersionInDB(BaseModel):
    """Version model stored in MongoDB"""
    version_id: str
    content_id: str
    uploaded_by: str
    file_path: str = ""  # Empty when the upload failed or no file was sent
    approved: bool = False
    created_at: datetime
    updated_at: datetime | None = None
