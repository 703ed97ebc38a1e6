"""FastAPI auth dependencies.

Learn: get_current_user is used as Depends() in route handlers. It turns
the Authorization header into a CurrentIdentity, or stops the request
with a 401 before the handler runs:

- no header                        → "Unauthorized"
- empty / malformed / forged token → "Invalid token"
- valid token, user no longer here → "Unauthorized"

The last case deliberately reuses the missing-header message, so a client
cannot tell "no credential" from "credential for a deleted user".
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from photo_api.auth.jwt import TokenError, verify
from photo_api.db.engine import get_db
from photo_api.db.models import MAX_ROW_ID, User

logger = structlog.get_logger()

BEARER_SCHEME = "Bearer"
UNAUTHORIZED = "Unauthorized"
INVALID_TOKEN = "Invalid token"


class CurrentIdentity:
    """The authenticated user making the request.

    Lives for a single request and is never persisted.
    """

    def __init__(self, user_id: int, email: str):
        self.user_id = user_id
        self.email = email

    def __repr__(self) -> str:
        return f"CurrentIdentity(user_id={self.user_id!r}, email={self.email!r})"


def _reject(detail: str, reason: str) -> HTTPException:
    logger.info("auth.rejected", reason=reason)
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": BEARER_SCHEME},
    )


def extract_bearer_token(authorization: str) -> str:
    """Return the token portion of a `Bearer <token>` header value.

    Raises TokenError when the scheme is wrong or the token is empty.
    """
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme != BEARER_SCHEME or not token:
        raise TokenError("Invalid token: missing bearer credential")
    return token


def decode_identity_claims(token: str) -> tuple[int, str]:
    """Verify a token and pull out (user id, email)."""
    claims = verify(token)
    user_id = claims.get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise TokenError("Invalid token: id claim missing")
    return user_id, claims.get("email") or ""


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> CurrentIdentity:
    """Resolve the request's identity (required — 401 otherwise)."""
    if authorization is None:
        raise _reject(UNAUTHORIZED, "missing_header")

    try:
        user_id, email = decode_identity_claims(extract_bearer_token(authorization))
    except TokenError as e:
        raise _reject(INVALID_TOKEN, str(e))

    # An id no row can have is just another unknown user
    if not 0 < user_id <= MAX_ROW_ID:
        raise _reject(UNAUTHORIZED, "unknown_user")

    # One primary-key lookup per request; no caching of users
    user = await db.get(User, user_id)
    if user is None:
        raise _reject(UNAUTHORIZED, "unknown_user")

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return CurrentIdentity(user_id=user.id, email=email or user.email)
