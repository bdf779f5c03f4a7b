"""
VisitorBook Backend: Access Log Middleware
============================================

What:  One access log line per HTTP request.
How:   Times the downstream call and logs method, path, status, latency,
       request ID and the caller's address. Behind the cloud load balancer
       the caller is the first X-Forwarded-For hop, not the socket peer.

Example line:
    2024-01-15T12:00:00 [INFO] visitorbook.access: POST /api/messages -> 201 (4.2ms) rid=3f2a9c1b ip=203.0.113.7

Guest names and message bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("visitorbook.access")

# Probed every few seconds by orchestrators
SILENT_PATHS = frozenset({"/health"})


def level_for_status(status_code: int) -> int:
    """5xx → ERROR, 4xx → WARNING, anything else → INFO."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def caller_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the /api routes."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SILENT_PATHS:
            return await call_next(request)

        began = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - began) * 1000

        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d (%.1fms) rid=%s ip=%s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            caller_address(request),
        )
        return response
