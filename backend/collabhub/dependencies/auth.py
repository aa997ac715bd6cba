from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from ..core.errors import AuthenticationError
from ..core.security import decode_access_token
from ..db.mongo import db

bearer = HTTPBearer(auto_error=False)

async def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    access_token: str | None = Cookie(None, alias="accessToken"),
):
    """Resolve the caller from an Authorization: Bearer header, else the accessToken cookie."""
    token = creds.credentials if creds else access_token
    if not token:
        raise AuthenticationError("Unauthorized request")
    try:
        payload = decode_access_token(token)
        user_id = payload.get("sub")
        if not user_id:
            raise ValueError("no sub")
    except (JWTError, ValueError):
        raise AuthenticationError("Invalid access token")

    user = await db()["users"].find_one(
        {"user_id": user_id}, {"_id": 0, "password_hash": 0, "refresh_token": 0}
    )
    if not user:
        raise AuthenticationError("Invalid access token")
    return user
