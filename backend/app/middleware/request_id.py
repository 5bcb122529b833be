"""
LocalBiz Directory — Request ID Middleware
============================================

What:  Tags every request with a short correlation id.
How:   Reuses the caller's X-Request-ID header when present, otherwise
       generates one. The id lives in a ContextVar for loggers and error
       handlers, in request.state for handlers, and in the response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# coroutine-local: concurrent requests share a thread
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns request ids; client-supplied ids longer than 64 chars are replaced."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER, "")
        if not rid or len(rid) > 64:
            rid = new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
