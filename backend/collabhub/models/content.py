from pydantic import BaseModel
from datetime import datetime

class ContentCreate(BaseModel):
    type: str

class ContentUpdate(BaseModel):
    # Written as given; an omitted type is stored as null
    type: str | None = None

class ContentInDB(BaseModel):
    content_id: str
    project_id: str
    type: str | None = None
    # Ordered version ids; index 0 is the most recently approved version
    versions: list[str] = []
    created_at: datetime
    updated_at: datetime | None = None
