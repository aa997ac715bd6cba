from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(status_code: int, data, message: str = "Success") -> JSONResponse:
    """Wrap data in the standard {statusCode, data, message, success} envelope."""
    body = {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, custom_encoder={ObjectId: str}),
    )


def public_doc(doc: dict | None, *hidden: str) -> dict | None:
    """Drop Mongo's _id and any hidden fields from a stored document."""
    if doc is None:
        return None
    return {k: v for k, v in doc.items() if k != "_id" and k not in hidden}


def public_user(user: dict | None) -> dict | None:
    return public_doc(user, "password_hash", "refresh_token")
