"""Fixed-window rate limiting for the public API.

Each client (by IP) gets ``max_requests`` per window. Windows are per
client: a window starts at that client's first request and resets once it
has fully elapsed. This differs from express-rate-limit's default store,
which resets every client on one shared schedule.
"""

import logging
import math
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from landmark_api.models import AppError, ErrorCode

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """Counts hits per client in fixed windows."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window = window_seconds
        self._clock = clock
        # client -> (window_start, count)
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_prune = clock()

    def hit(self, client: str) -> tuple[bool, float]:
        """Record a request.

        Returns:
            ``(allowed, retry_after_seconds)``. ``retry_after_seconds`` is 0
            when the request is allowed.
        """
        now = self._clock()
        self._prune(now)

        start, count = self._windows.get(client, (now, 0))
        if now - start >= self._window:
            start, count = now, 0

        if count >= self._max_requests:
            return False, self._window - (now - start)

        self._windows[client] = (start, count + 1)
        return True, 0.0

    def _prune(self, now: float) -> None:
        if now - self._last_prune < self._window:
            return
        self._windows = {
            client: (start, count)
            for client, (start, count) in self._windows.items()
            if now - start < self._window
        }
        self._last_prune = now


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests under ``path_prefix`` once a client is over its limit."""

    def __init__(self, app, limiter: FixedWindowRateLimiter, path_prefix: str = "/api") -> None:
        super().__init__(app)
        self._limiter = limiter
        self._path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self._path_prefix):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        allowed, retry_after = self._limiter.hit(client)
        if not allowed:
            logger.info(f"[HTTP] Rate limited {client} on {request.url.path}")
            error = AppError(
                code=ErrorCode.RATE_LIMITED,
                message=f"Rate limit exceeded for {client}",
                user_message="Too many requests, please try again later.",
            )
            return JSONResponse(
                status_code=429,
                content={"success": False, "error": error.model_dump(mode="json")},
                headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
            )
        return await call_next(request)
