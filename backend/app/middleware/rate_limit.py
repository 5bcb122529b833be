"""
LocalBiz Directory — Credential Rate Limiter
==============================================

What:  Per-client sliding-window limit on the login and register endpoints.
How:   Keeps the timestamps of recent attempts per (client IP, path) in
       memory. When a key already has `max_requests` attempts inside the
       window the request is answered with 429 and a Retry-After header,
       without reaching the route.

Only paths starting with one of RATE_LIMIT_PATHS are counted; the rest of
the API is not limited. State is per process, so a multi-worker deployment
multiplies the effective limit by the worker count.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

_CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding-window counter keyed by client IP and path.

    Args:
        max_requests: attempts allowed per window (default RATE_LIMIT_REQUESTS)
        window_seconds: window length (default RATE_LIMIT_WINDOW)
        paths: guarded path prefixes (default RATE_LIMIT_PATHS)
    """

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self.paths = tuple(paths if paths is not None else settings.rate_limit_paths_list)
        self._hits: Dict[Tuple[str, str], List[float]] = defaultdict(list)
        self._seen = 0

    def is_limited_path(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" or not self.is_limited_path(path):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        key = (client_ip, path)
        now = time.time()
        window_start = now - self.window_seconds

        hits = [ts for ts in self._hits[key] if ts > window_start]
        self._hits[key] = hits

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for %s on %s: %d attempts in %ds",
                client_ip, path, len(hits), self.window_seconds,
            )
            return self._reject(RateLimitExceededError(retry_after=retry_after))

        hits.append(now)

        self._seen += 1
        if self._seen % _CLEANUP_EVERY == 0:
            self._cleanup(window_start)

        return await call_next(request)

    def _reject(self, exc: RateLimitExceededError) -> JSONResponse:
        # raised exceptions do not reach the app's handlers from middleware,
        # so the error body is built here
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": exc.context,
                "request_id": request_id_var.get(""),
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    def _cleanup(self, window_start: float) -> None:
        stale = [
            key for key, stamps in self._hits.items()
            if not stamps or stamps[-1] <= window_start
        ]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("Dropped %d idle rate-limit keys", len(stale))
