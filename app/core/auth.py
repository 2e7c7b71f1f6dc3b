"""
Caller identification: client IP extraction, X-User-ID checks and bearer
API-token authentication for the extension surface.
"""

import logging
import re
from typing import Optional

from fastapi import HTTPException, Request

from app.services.token_service import validate_api_token

logger = logging.getLogger(__name__)

_USER_ID_MAX_LEN = 128
_USER_ID_RE = re.compile(r"^[a-zA-Z0-9\-_.]+$")


def validate_user_id(user_id: str) -> None:
    """
    Raises HTTP 400 if user_id is longer than 128 characters or contains
    characters outside [a-zA-Z0-9-_.]. Keeps Firestore fields and Redis
    rate-limit keys well formed.
    """
    if len(user_id) > _USER_ID_MAX_LEN or not _USER_ID_RE.match(user_id):
        raise HTTPException(status_code=400, detail={"code": "INVALID_USER_ID", "message": "Invalid X-User-ID"})


def get_client_ip(request: Request) -> str:
    """Extracts the real client IP from headers, falling back to host."""
    cf_ip = request.headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip

    x_forwarded = request.headers.get("x-forwarded-for")
    if x_forwarded:
        return x_forwarded.split(",")[0].strip()

    return request.client.host if request.client else "127.0.0.1"


def caller_identifier(request: Request, user_id: Optional[str]) -> str:
    """Rate-limit key: the validated user ID when given, else the client IP."""
    if user_id:
        validate_user_id(user_id)
        return f"user:{user_id}"
    return f"ip:{get_client_ip(request)}"


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Token from an `Authorization: Bearer <token>` header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_api_token(authorization: Optional[str]) -> str:
    """Returns the token owner's user_id or raises 401 INVALID_TOKEN."""
    token = parse_bearer(authorization)
    if not token:
        raise HTTPException(
            status_code=401,
            detail={"code": "INVALID_TOKEN", "message": "Missing or invalid authorization header"},
        )

    user_id = validate_api_token(token)
    if not user_id:
        logger.warning("[AUTH] Rejected API token")
        raise HTTPException(
            status_code=401,
            detail={"code": "INVALID_TOKEN", "message": "Invalid API token"},
        )
    return user_id
