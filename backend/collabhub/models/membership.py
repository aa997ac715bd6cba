from pydantic import BaseModel
from typing import Literal

# Project roles (assigned per project, not per user account)
ProjectRole = Literal["owner", "editor", "member"]

# Roles an owner may hand out; ownership itself is only granted at creation
ASSIGNABLE_ROLES = ("editor", "member")

class MemberApprove(BaseModel):
    user_id: str
    # Checked against ASSIGNABLE_ROLES by the service so the error is a plain 400
    role: str

class ProjectMember(BaseModel):
    user_id: str
    role: ProjectRole
