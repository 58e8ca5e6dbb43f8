"""Auth API — signup, login, logout, current identity.

Learn: Signup and login are open routes: they establish identity, so
they call the Authenticator directly and then mint a token into the
`token` cookie. Logout and /me sit behind require_identity.

Logout only tells the browser to drop the cookie. The token itself
stays valid until it expires; there is no server-side session to kill.
"""

from fastapi import APIRouter, Depends, Request, Response

from secretlane.auth.dependencies import (
    Identity,
    current_user_id,
    current_username,
    require_identity,
)
from secretlane.auth.jwt import TokenCodec
from secretlane.config import Settings
from secretlane.db.models import User
from secretlane.schemas.auth import (
    Credentials,
    IdentityRead,
    MessageResponse,
    SessionResponse,
)
from secretlane.services.auth_service import Authenticator

router = APIRouter()


def _auth(request: Request) -> Authenticator:
    return request.app.state.authenticator


def _start_session(request: Request, response: Response, user: User) -> None:
    settings: Settings = request.app.state.settings
    codec: TokenCodec = request.app.state.token_codec
    response.set_cookie(
        key=settings.cookie_name,
        value=codec.issue(user.id, user.username),
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


@router.post("/signup", response_model=SessionResponse)
async def signup(
    body: Credentials,
    request: Request,
    response: Response,
    auth: Authenticator = Depends(_auth),
):
    """Create an account and log it in immediately."""
    user = await auth.signup(body.username, body.password)
    _start_session(request, response, user)
    return SessionResponse(
        message="signed up successfully", user_id=user.id, username=user.username
    )


@router.post("/login", response_model=SessionResponse)
async def login(
    body: Credentials,
    request: Request,
    response: Response,
    auth: Authenticator = Depends(_auth),
):
    user = await auth.login(body.username, body.password)
    _start_session(request, response, user)
    return SessionResponse(
        message="logged in successfully", user_id=user.id, username=user.username
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    identity: Identity = Depends(require_identity),
):
    settings: Settings = request.app.state.settings
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message="logged out")


@router.get("/me", response_model=IdentityRead)
async def get_me(request: Request, identity: Identity = Depends(require_identity)):
    """Who the session cookie says the caller is."""
    return IdentityRead(
        user_id=current_user_id(request), username=current_username(request)
    )
