from pydantic import BaseModel, EmailStr
from datetime import datetime

class UserRegister(BaseModel):
    username: str
    email: EmailStr
    password: str

class UserLogin(BaseModel):
    username: str | None = None
    email: EmailStr | None = None
    password: str

class ChangePasswordBody(BaseModel):
    old_password: str
    new_password: str

class UpdateAccountBody(BaseModel):
    email: EmailStr | None = None

class RefreshTokenBody(BaseModel):
    refresh_token: str | None = None

class UserInDB(BaseModel):
    user_id: str
    username: str
    email: EmailStr
    password_hash: str
    # project_id -> role; authoritative for every permission check
    project_roles: dict[str, str] = {}
    refresh_token: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
