from datetime import datetime, timedelta, timezone
import uuid
from jose import jwt
from .settings import settings
import bcrypt

# Use bcrypt directly to avoid passlib version issues
def hash_password(password: str) -> str:
    """Hash password using bcrypt directly."""
    # Ensure password is bytes and not longer than 72 bytes
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')

def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash."""
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    return bcrypt.checkpw(password_bytes, hashed.encode('utf-8'))

def create_access_token(user: dict) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MIN)
    to_encode = {
        "sub": user["user_id"],
        "username": user.get("username"),
        "email": user.get("email"),
        "exp": exp,
    }
    return jwt.encode(to_encode, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALG)

def create_refresh_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MIN)
    # jti keeps tokens minted within the same second distinct
    to_encode = {"sub": user_id, "jti": uuid.uuid4().hex, "iat": now, "exp": exp}
    return jwt.encode(to_encode, settings.REFRESH_TOKEN_SECRET, algorithm=settings.JWT_ALG)

def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALG])

def decode_refresh_token(token: str) -> dict:
    return jwt.decode(token, settings.REFRESH_TOKEN_SECRET, algorithms=[settings.JWT_ALG])
