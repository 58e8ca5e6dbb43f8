"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: The workspace router and /logout, /me take Identity through
Depends(require_identity), so they reject unauthenticated requests
before any handler code runs. Health, signup and login are open.
"""

from fastapi import APIRouter

from secretlane.api.auth import router as auth_router
from secretlane.api.health import router as health_router
from secretlane.api.workspaces import router as workspaces_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(workspaces_router, tags=["workspaces"])
