import logging
import uuid
from fastapi import APIRouter, Body, Cookie, Depends
from fastapi.responses import JSONResponse
from jose import JWTError
from datetime import datetime, timezone
from ..db.mongo import db
from ..core.errors import AuthenticationError, ConflictError, InternalError, ValidationError
from ..core.responses import api_response, public_user
from ..core.security import (
    create_access_token, create_refresh_token, decode_refresh_token, hash_password, verify_password,
)
from ..core.settings import settings
from ..dependencies.auth import get_current_user
from ..models.user import ChangePasswordBody, RefreshTokenBody, UpdateAccountBody, UserInDB, UserLogin, UserRegister

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _cookie_options() -> dict:
    return {"httponly": True, "secure": settings.COOKIE_SECURE}


def _set_auth_cookies(response: JSONResponse, access_token: str, refresh_token: str) -> JSONResponse:
    response.set_cookie(ACCESS_COOKIE, access_token, **_cookie_options())
    response.set_cookie(REFRESH_COOKIE, refresh_token, **_cookie_options())
    return response


async def _issue_tokens(user: dict) -> tuple[str, str]:
    """Mint a token pair and persist the refresh token on the user."""
    try:
        access_token = create_access_token(user)
        refresh_token = create_refresh_token(user["user_id"])
    except JWTError as e:
        logger.exception("token generation failed user=%s", user["user_id"])
        raise InternalError("Something went wrong while generating refresh and access token") from e

    await db()["users"].update_one(
        {"user_id": user["user_id"]},
        {"$set": {"refresh_token": refresh_token}}
    )
    return access_token, refresh_token


@router.post("/register")
async def register(body: UserRegister):
    username = body.username.strip()
    if not username or not body.password:
        raise ValidationError("All Fields are Required")

    email = body.email.lower()
    exists = await db()["users"].find_one({"$or": [{"username": username}, {"email": email}]})
    if exists:
        raise ConflictError("User with email or username already exists")

    now = datetime.now(timezone.utc)
    doc = UserInDB(
        user_id=str(uuid.uuid4()),
        username=username,
        email=email,
        password_hash=hash_password(body.password),
        created_at=now,
        updated_at=now,
    ).model_dump()
    await db()["users"].insert_one(doc)

    access_token, refresh_token = await _issue_tokens(doc)
    logger.info("user registered user=%s", doc["user_id"])
    response = api_response(201, public_user(doc), "User registered successfully")
    return _set_auth_cookies(response, access_token, refresh_token)


@router.post("/login")
async def login(body: UserLogin):
    if not body.username and not body.email:
        raise ValidationError("Username or email is required")

    clauses = []
    if body.username:
        clauses.append({"username": body.username.strip()})
    if body.email:
        clauses.append({"email": body.email.lower()})
    user = await db()["users"].find_one({"$or": clauses})
    if not user or not verify_password(body.password, user["password_hash"]):
        raise AuthenticationError("Invalid Credentials")

    access_token, refresh_token = await _issue_tokens(user)
    data = {"user": public_user(user), "accessToken": access_token, "refreshToken": refresh_token}
    response = api_response(200, data, "User logged in successfully")
    return _set_auth_cookies(response, access_token, refresh_token)


@router.post("/logout")
async def logout(user=Depends(get_current_user)):
    await db()["users"].update_one(
        {"user_id": user["user_id"]},
        {"$unset": {"refresh_token": ""}}
    )
    response = api_response(200, {}, "User logged out")
    response.delete_cookie(ACCESS_COOKIE, **_cookie_options())
    response.delete_cookie(REFRESH_COOKIE, **_cookie_options())
    return response


@router.post("/refresh-token")
async def refresh_access_token(
    body: RefreshTokenBody | None = Body(None),
    refresh_cookie: str | None = Cookie(None, alias=REFRESH_COOKIE),
):
    incoming = refresh_cookie or (body.refresh_token if body else None)
    if not incoming:
        raise AuthenticationError("Unauthorized request")

    try:
        payload = decode_refresh_token(incoming)
    except JWTError:
        raise AuthenticationError("Invalid refresh token")

    user = await db()["users"].find_one({"user_id": payload.get("sub")})
    if not user:
        raise AuthenticationError("Invalid refresh token")
    if incoming != user.get("refresh_token"):
        raise AuthenticationError("Refresh token is expired or used")

    access_token, refresh_token = await _issue_tokens(user)
    data = {"accessToken": access_token, "refreshToken": refresh_token}
    response = api_response(200, data, "Access token refreshed")
    return _set_auth_cookies(response, access_token, refresh_token)


@router.post("/change-password")
async def change_password(body: ChangePasswordBody, user=Depends(get_current_user)):
    stored = await db()["users"].find_one({"user_id": user["user_id"]}, {"_id": 0, "password_hash": 1})
    if not stored or not verify_password(body.old_password, stored["password_hash"]):
        raise ValidationError("Invalid old password")

    await db()["users"].update_one(
        {"user_id": user["user_id"]},
        {"$set": {
            "password_hash": hash_password(body.new_password),
            "updated_at": datetime.now(timezone.utc),
        }}
    )
    return api_response(200, {}, "Password changed successfully")


@router.get("/me")
async def me(user=Depends(get_current_user)):
    return api_response(200, user, "User fetched successfully")


@router.patch("/me")
async def update_account(body: UpdateAccountBody, user=Depends(get_current_user)):
    if not body.email:
        raise ValidationError("Email is required")

    email = body.email.lower()
    taken = await db()["users"].find_one({"email": email, "user_id": {"$ne": user["user_id"]}})
    if taken:
        raise ConflictError(f"Email '{email}' is already used by another user")

    await db()["users"].update_one(
        {"user_id": user["user_id"]},
        {"$set": {"email": email, "updated_at": datetime.now(timezone.utc)}}
    )
    updated = await db()["users"].find_one(
        {"user_id": user["user_id"]}, {"_id": 0, "password_hash": 0, "refresh_token": 0}
    )
    return api_response(200, updated, "Account details updated successfully")
