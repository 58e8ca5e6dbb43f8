"""FastAPI session dependencies.

Learn: require_identity is the session gate. It runs before any
protected handler and walks the request through

    no cookie → token present → verified → authorized

short-circuiting with 401 at the first failed step. On success it
returns a typed Identity, which handlers take as an argument, and also
leaves it on request.state for code that only has the request.
"""

from dataclasses import dataclass

import structlog
from fastapi import Depends, HTTPException, Request

from secretlane.auth.jwt import TokenCodec
from secretlane.errors import InvalidTokenError

logger = structlog.get_logger()


@dataclass(frozen=True)
class Identity:
    """The authenticated caller. Only exists after a token verified."""

    user_id: int
    username: str


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


async def require_identity(
    request: Request,
    codec: TokenCodec = Depends(get_token_codec),
) -> Identity:
    """Verify the session cookie (required — 401 if missing or invalid)."""
    cookie_name = request.app.state.settings.cookie_name
    token = request.cookies.get(cookie_name)
    if not token:
        raise HTTPException(status_code=401, detail="Missing auth cookie")

    try:
        claims = codec.verify(token)
    except InvalidTokenError as e:
        logger.info("auth.token_rejected", reason=e.message)
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    identity = Identity(user_id=claims.user_id, username=claims.username)
    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=identity.user_id)
    return identity


def current_user_id(request: Request) -> int:
    """Authenticated user id, or 0 when the request carries no identity."""
    identity = getattr(request.state, "identity", None)
    return identity.user_id if identity else 0


def current_username(request: Request) -> str:
    """Authenticated username, or "" when the request carries no identity."""
    identity = getattr(request.state, "identity", None)
    return identity.username if identity else ""
