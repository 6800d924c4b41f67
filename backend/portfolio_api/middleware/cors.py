"""
Portfolio Backend: CORS & Preflight Middleware
================================================

What:  Adds Access-Control-* headers to every response and answers every
       OPTIONS request with 204 before routing.
Why:   The frontend is served from a different origin. Starlette's
       CORSMiddleware only decorates requests that carry an Origin header
       and only short-circuits "real" preflights; this API promises the
       headers on all responses and an empty 204 for any OPTIONS, on every
       route, without running handler logic or auth.

Origin selection:
    CORS_ORIGINS contains "*"        → Access-Control-Allow-Origin: *
    request Origin is in CORS_ORIGINS → echo it back (plus Vary: Origin)
    otherwise                         → first configured origin

Unexpected errors:
    An exception that no PortfolioError handler claimed would otherwise
    reach Starlette's ServerErrorMiddleware, which sits outside this one and
    answers without CORS headers. It is turned into the generic 500 body
    here so the browser can still read it.
"""

import logging
from typing import List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from portfolio_api.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-Request-ID"


class PreflightCORSMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, allow_origins: List[str]):
        super().__init__(app)
        # An empty CORS_ORIGINS behaves like "*"
        self.allow_origins = allow_origins or ["*"]
        self.allow_all = "*" in self.allow_origins

    def _cors_headers(self, request: Request) -> dict:
        headers = {
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
        if self.allow_all:
            headers["Access-Control-Allow-Origin"] = "*"
            return headers

        origin = request.headers.get("origin")
        if origin in self.allow_origins:
            headers["Access-Control-Allow-Origin"] = origin
            # Caches must key on Origin once the header value varies with it
            headers["Vary"] = "Origin"
        else:
            headers["Access-Control-Allow-Origin"] = self.allow_origins[0]
        # Credentials are only allowed with an explicit origin
        headers["Access-Control-Allow-Credentials"] = "true"
        return headers

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        headers = self._cors_headers(request)

        # Preflight: answered here, so no route, auth check or store call runs
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        try:
            response = await call_next(request)
        except Exception as e:
            rid = request_id_var.get("")
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid,
                request.method,
                request.url.path,
                str(e),
                exc_info=True,
            )
            # Stack trace stays in the log; the body is the generic 500
            return JSONResponse(
                status_code=500,
                content={
                    "error": "internal_server_error",
                    "message": "An unexpected error occurred",
                    "request_id": rid or None,
                },
                headers=headers,
            )

        for name, value in headers.items():
            response.headers[name] = value
        return response
