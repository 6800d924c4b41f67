"""
Portfolio Backend: Request Logging Middleware
===============================================

What:  One access-log line per HTTP request: method, path, status,
       duration, request ID, client IP and (for cross-origin calls) Origin.
How:   Wraps call_next, measures with time.perf_counter, picks the log level
       with access_log_level().

Level rules:
    OPTIONS preflight → DEBUG (browsers send one before most form posts)
    5xx               → ERROR
    401 / 4xx         → WARNING (a run of 401s on /api/review is a guessed key)
    else              → INFO

Health-check and docs paths are not logged at all. Request bodies are never
logged: they carry contact-form messages, email addresses and shared secrets.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from portfolio_api.middleware.request_id import request_id_var

logger = logging.getLogger("portfolio.access")

# Polled by uptime monitors or only opened by hand
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def access_log_level(method: str, status: int) -> int:
    """Log level for one access line."""
    if method == "OPTIONS":
        return logging.DEBUG
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log on the `portfolio.access` logger."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        # Behind a proxy this is the proxy's address; uvicorn's
        # --proxy-headers rewrites request.client when enabled
        client_ip = request.client.host if request.client else "unknown"
        origin = request.headers.get("origin", "-")
        rid = request_id_var.get("")

        logger.log(
            access_log_level(request.method, response.status_code),
            "%s %s %d %.1fms [%s] from %s origin=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            origin,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "origin": origin,
            },
        )
        return response
