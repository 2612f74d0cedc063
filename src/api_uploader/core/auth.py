"""
Bearer token authentication.

Tokens are HS256 JWTs signed with `JWT_SECRET`; the `sub` claim carries the
caller's user id. Route handlers receive that id through `get_current_user_id`:

    @router.get("/videos")
    async def list_videos(user_id: UUID = Depends(get_current_user_id)):
        ...
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from jose import JWTError, jwt

from api_uploader.config.base_config import BaseConfig, get_settings
from api_uploader.exceptions.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


def get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise UnauthorizedError("Authorization header is missing")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Malformed authorization header")
    return token


def create_access_token(
    user_id: UUID, config: BaseConfig, expires_delta: Optional[timedelta] = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=config.JWT_EXPIRATION_MINUTES))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def validate_jwt(token: str, config: BaseConfig) -> UUID:
    """Verify signature and expiry, returning the subject as a user id."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT validation failed: {str(e)}")
        raise UnauthorizedError("Invalid or expired token") from e

    subject = payload.get("sub")
    try:
        return UUID(str(subject))
    except ValueError as e:
        raise UnauthorizedError("Token subject is not a valid user id") from e


async def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    config: BaseConfig = Depends(get_settings),
) -> UUID:
    token = get_bearer_token(authorization)
    return validate_jwt(token, config)
