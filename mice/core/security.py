"""Security and authentication utilities."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from fastapi import HTTPException, Request

from mice.core import config
from mice.core.constants import DYNAMIC_TOKEN_BYTES, UserRole
from mice.core.exceptions import ForbiddenError
from mice.schemas.auth import TokenPayload


def generate_dynamic_token() -> str:
    """Generate an unguessable dynamic QR token (128 bits, URL-safe)."""
    return secrets.token_urlsafe(DYNAMIC_TOKEN_BYTES)


def create_access_token(
    user_id: int,
    role: UserRole,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token carrying the user's id, role and email."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "userId": user_id,
        "role": UserRole(role).value,
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)


def verify_access_token(request: Request) -> TokenPayload:
    """Verify the bearer JWT from the Authorization header and return its claims."""
    auth_header = request.headers.get("Authorization")

    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="No token provided")

    token = auth_header[len("Bearer "):]

    try:
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    try:
        return TokenPayload.model_validate(payload)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token")


def require_role(role: UserRole, detail: str) -> Callable[[Request], TokenPayload]:
    """Build a dependency that only lets users holding ``role`` through."""

    def dependency(request: Request) -> TokenPayload:
        current_user = verify_access_token(request)
        if current_user.role != role:
            raise ForbiddenError(detail, cause=f"role {current_user.role.value}")
        return current_user

    dependency.__name__ = f"require_{role.value.lower()}"
    return dependency


require_admin = require_role(UserRole.ADMIN, "Admin access required")
require_attendee = require_role(UserRole.ATTENDEE, "Attendee access required")
