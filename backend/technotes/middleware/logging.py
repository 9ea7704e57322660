"""
TechNotes Backend - Request Logging Middleware
================================================

What:  One access-log line per request: method, path, origin, status, duration.
How:   Measures wall time around call_next and picks the level from the status
       (5xx → ERROR, 4xx → WARNING, else INFO).
Who:   Logger name "technotes.access", so it can be routed separately.

Request bodies are never logged: they carry passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from technotes.middleware.request_id import request_id_var

logger = logging.getLogger("technotes.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request after the response is produced. /health is skipped."""

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        origin = request.headers.get("origin", "-")
        rid = request_id_var.get("")

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] origin=%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            origin,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "origin": origin,
            },
        )

        return response
