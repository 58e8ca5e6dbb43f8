"""FastAPI application factory.

Learn: create_app(settings) builds every collaborator from one resolved
Settings object and hangs them on app.state: the Database variant for
the configured dialect, the TokenCodec, the Authenticator and the
WorkspaceService. No module-level singletons, so tests can build as
many isolated apps as they like.

Two things are fatal at startup rather than per request:
- an empty JWT secret (TokenCodec raises SigningError in create_app);
- unreachable storage (the lifespan ping raises StorageError).

Run with: uvicorn secretlane.main:create_app --factory
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from secretlane import __version__
from secretlane.api import api_router
from secretlane.auth.jwt import TokenCodec
from secretlane.config import Settings, get_settings
from secretlane.db.engine import open_database
from secretlane.db.users import UserStore
from secretlane.db.workspaces import WorkspaceStore
from secretlane.errors import SecretlaneError
from secretlane.middleware.request_id import RequestIdMiddleware
from secretlane.services.auth_service import Authenticator
from secretlane.services.workspace_service import WorkspaceService

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` at
    shutdown. An exception before `yield` aborts startup.
    """
    settings: Settings = app.state.settings
    database = app.state.database

    logger.info(
        "secretlane.starting",
        version=__version__,
        environment=settings.environment,
        dialect=database.dialect,
        port=settings.port,
    )
    await database.ping()
    await database.create_schema(seed_default_user=settings.seed_default_user)

    yield

    logger.info("secretlane.shutdown")
    await database.dispose()


async def _handle_app_error(request: Request, exc: SecretlaneError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request.failed", error=type(exc).__name__, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()

    token_codec = TokenCodec(
        settings.jwt_secret, ttl=timedelta(hours=settings.token_ttl_hours)
    )
    database = open_database(settings)

    app = FastAPI(
        title="Secretlane",
        description="Multi-tenant workspace backend with cookie sessions",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.token_codec = token_codec
    app.state.authenticator = Authenticator(UserStore(database))
    app.state.workspace_service = WorkspaceService(WorkspaceStore(database))

    # Starlette runs middleware in reverse registration order:
    # RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(SecretlaneError, _handle_app_error)
    app.include_router(api_router)

    return app
