"""JWT token signing and verification.

Learn: Tokens are stateless — the claims ({id, email}) travel inside the
signed token, so verifying one needs only the shared secret. There is no
refresh or revocation; an expiry is embedded only when configured.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from photo_api.config import settings


class TokenError(Exception):
    """Raised when a token cannot be verified."""


def sign(claims: dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """Sign a JWT carrying the given identity claims."""
    payload = dict(claims)
    minutes = expires_minutes or settings.access_token_expire_minutes
    if minutes:
        payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(
    user_id: int, email: str, expires_minutes: Optional[int] = None
) -> str:
    """Token for a user, in the shape the auth dependency expects."""
    return sign({"id": user_id, "email": email}, expires_minutes=expires_minutes)


def verify(token: str) -> dict[str, Any]:
    """Verify and decode a JWT token.

    Returns the claims dict on success.
    Raises TokenError on failure (empty, malformed, bad signature, expired).
    """
    if not token:
        raise TokenError("Invalid token: empty")
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")
