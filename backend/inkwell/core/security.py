import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import jwt
from fastapi import Request

from inkwell.core.config import settings
from inkwell.core.exceptions import Unauthorized

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed admin token. Login itself lives outside this service."""
    now = datetime.utcnow()
    payload = {
        "role": ADMIN_ROLE,
        **data,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=settings.JWT_EXPIRATION_HOURS)),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Token expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Invalid token: {e}")
    return None


def is_authorized(request: Request) -> bool:
    """True when the request carries a valid admin bearer token."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False

    payload = decode_access_token(token.strip())
    return bool(payload) and payload.get("role") == ADMIN_ROLE


async def require_admin(request: Request) -> None:
    """Route dependency for mutations; runs before any store access."""
    if not is_authorized(request):
        logger.warning(f"Rejected unauthorized {request.method} {request.url.path}")
        raise Unauthorized()
