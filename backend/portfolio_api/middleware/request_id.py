"""
Portfolio Backend: Request ID Middleware
==========================================

What:  Gives every request a short correlation ID.
How:   Uses the client's X-Request-ID when present, otherwise the first
       8 characters of a UUID4. The ID is stored in a ContextVar (read by
       the access log and the error handlers) and echoed in the response.
       Error bodies include it so a failed form submission can be matched
       to its log lines.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client-supplied IDs longer than this are replaced, so a header cannot
# flood every log line of the request
MAX_REQUEST_ID_LENGTH = 64


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", "")
        if not rid or len(rid) > MAX_REQUEST_ID_LENGTH:
            # 8 hex chars are enough to correlate a personal site's traffic
            rid = str(uuid.uuid4())[:8]

        # Set before call_next: inner middleware and handlers run in a copy
        # of this context and read the ID from there
        request_id_var.set(rid)

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
