"""Request ID and access logging for the secretlane API.

Learn: Every request gets an ID, either the caller's X-Request-ID
(when it looks like one) or a fresh UUID. It is bound to structlog's
contextvars together with method and path, so every log line emitted
while handling the request carries it, and it is echoed back in the
response. The session dependency adds user_id to the same context once
a token verifies.

Health probes are answered without the access line; a load balancer
polling /healthz every few seconds would drown everything else.
"""

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

QUIET_PATHS = frozenset({"/api/v1/healthz"})

# Caller-supplied IDs end up in logs and a response header
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _request_id(request: Request) -> str:
    incoming = request.headers.get("X-Request-ID", "")
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate or propagate a request ID and log each API call."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = _request_id(request)
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )

        started = time.perf_counter()
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        if path not in QUIET_PATHS:
            logger.info(
                "http.request",
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        return response
