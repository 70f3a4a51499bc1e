"""Access Tokens — issue and verify the bearer JWT that carries the principal.

Invariants:
    - `sub` holds the user id as a string; `is_admin` is the site-admin flag
    - Verification failures of any kind raise AuthenticationError, never a partial principal
    - Site-admin status is read from the token only; nothing downstream re-derives it

Design Decisions:
    - python-jose HS256: same JWT stack as the facility backend services
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from shelterhub.config import get_settings
from shelterhub.core.domain_types import Principal, UserId
from shelterhub.core.errors import AuthenticationError


def create_access_token(
    user_id: int, is_admin: bool = False, expires_minutes: int | None = None,
) -> str:
    settings = get_settings()
    minutes = expires_minutes if expires_minutes is not None else settings.jwt_expire_minutes
    payload = {
        "sub": str(user_id),
        "is_admin": bool(is_admin),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

    sub = payload.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise AuthenticationError("Token subject is not a user id")
    return Principal(
        user_id=UserId(user_id),
        is_site_admin=payload.get("is_admin") is True,
    )
