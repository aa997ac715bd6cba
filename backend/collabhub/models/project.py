from pydantic import BaseModel
from datetime import datetime
from .membership import ProjectMember

class ProjectCreate(BaseModel):
    name: str
    description: str

class ProjectUpdate(BaseModel):
    name: str | None = None
    description: str | None = None

class ProjectInDB(BaseModel):
    project_id: str
    name: str
    description: str
    members: list[ProjectMember] = []
    comments: list[str] = []
    is_released: bool = False
    created_at: datetime
    updated_at: datetime | None = None
