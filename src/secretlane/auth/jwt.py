"""JWT session token creation and verification.

Learn: A session token carries user_id, username, sub (= username),
iat and exp (iat + 24h by default), signed with HS256 under a secret
that is fixed for the life of the process. Tokens issued under one
secret cannot be verified after the secret changes.

Validity window is [iat, exp) with no leeway.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from secretlane.errors import InvalidTokenError, SigningError

ALGORITHM = "HS256"


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Issues and verifies session tokens under one immutable secret."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise SigningError("JWT secret is not set")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, user_id: int, username: str) -> str:
        """Create a signed token for the given identity."""
        issued = datetime.fromtimestamp(int(self._clock()), tz=timezone.utc)
        payload = {
            "user_id": user_id,
            "username": username,
            "sub": username,
            "iat": issued,
            "exp": issued + self._ttl,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        except (TypeError, ValueError) as e:
            raise SigningError(f"could not sign token: {e}") from e

    def verify(self, token: str) -> SessionClaims:
        """Decode and validate a token.

        Raises InvalidTokenError on bad encoding, bad signature, expiry,
        or a payload without the expected claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"invalid token: {e}") from e

        user_id = payload.get("user_id")
        username = payload.get("username")
        if (
            not isinstance(user_id, int)
            or isinstance(user_id, bool)
            or not isinstance(username, str)
            or not username
            or payload["sub"] != username
        ):
            raise InvalidTokenError("invalid token: unexpected claims")

        return SessionClaims(
            user_id=user_id,
            username=username,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
