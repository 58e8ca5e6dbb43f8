"""Health check endpoint.

Learn: Reports whether the server is up and whether the storage
backend answers a trivial query.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from secretlane import __version__
from secretlane.errors import StorageError

router = APIRouter()


@router.get("/healthz")
async def health_check(request: Request):
    database = request.app.state.database
    checks = {"version": __version__, "dialect": database.dialect}

    try:
        await database.ping()
        checks["database"] = "ok"
    except StorageError as e:
        checks["database"] = f"error: {e.message}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        **checks,
    }
