"""
TechNotes Backend - CORS Origin Policy
========================================

What:  Rejects browser requests whose Origin is not on the configured allow-list.
How:   A pure predicate, is_origin_allowed(), plus a middleware that applies it
       to every request before Starlette's CORSMiddleware adds the response
       headers.

Policy:
    Origin header absent         → allowed (same-origin, curl, server-to-server)
    Origin in settings.cors_origins → allowed
    anything else                → 403 {"error": "cors_rejected", "message": "Not allowed by CORS"}

Starlette's CORSMiddleware on its own only withholds the CORS headers for an
unknown origin; the request still reaches the route handler. This middleware
fails it outright, preflights included.
"""

import logging
from typing import Iterable, Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from technotes.config import settings
from technotes.exceptions import CORSOriginError
from technotes.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


def is_origin_allowed(origin: Optional[str], allowed_origins: Iterable[str]) -> bool:
    """Grant the request if the origin is absent or on the allow-list."""
    if not origin:
        return True
    return origin in allowed_origins


class CORSPolicyMiddleware(BaseHTTPMiddleware):
    """
    Applies is_origin_allowed() to every request.

    The allow-list is fixed at construction (defaults to settings.cors_origins_list).
    """

    def __init__(self, app: ASGIApp, allowed_origins: Optional[Sequence[str]] = None):
        super().__init__(app)
        if allowed_origins is None:
            allowed_origins = settings.cors_origins_list
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")

        if not is_origin_allowed(origin, self.allowed_origins):
            exc = CORSOriginError(origin=origin)
            logger.warning(
                "Rejected %s %s from origin %s", request.method, request.url.path, origin
            )
            return JSONResponse(
                status_code=403,
                content={
                    "error": "cors_rejected",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get(""),
                },
            )

        return await call_next(request)
