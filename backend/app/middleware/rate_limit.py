"""
Tasklane Backend — Rate Limiting Middleware
=============================================

What:  Per-IP sliding window rate limiter.
How:   Each client IP owns a SlidingWindow of request timestamps. A request
       that would exceed RATE_LIMIT_REQUESTS inside RATE_LIMIT_WINDOW seconds
       gets 429 with a Retry-After header, in the same body shape as the
       other API errors.

Board clients send one request per drag-and-drop (PUT /api/items) and
re-read the board after each change, so the default budget (1000 requests
per 60 seconds) leaves room for long bursts of card moves.

The windows live in process memory: each worker process counts on its own.
"""

import logging
import time
from collections import deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings

logger = logging.getLogger(__name__)


class SlidingWindow:
    """Timestamps of one client's admitted requests, oldest first."""

    def __init__(self) -> None:
        self.hits: Deque[float] = deque()

    def prune(self, window_start: float) -> None:
        while self.hits and self.hits[0] <= window_start:
            self.hits.popleft()

    def admit(self, now: float, limit: int, window: int) -> Optional[int]:
        """
        Record a hit at `now` if the limit allows it.

        Returns:
            None if admitted, otherwise the seconds until the oldest hit
            leaves the window.
        """
        self.prune(now - window)
        if len(self.hits) >= limit:
            return int(self.hits[0] + window - now) + 1
        self.hits.append(now)
        return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Limits are read from settings on every request:
        rate_limit_requests: Max requests per window (default: 1000)
        rate_limit_window: Window duration in seconds (default: 60)

    Excluded paths: /health and the API docs.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    # Drop idle clients every this many admitted requests
    CLEANUP_EVERY = 1000

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._windows: Dict[str, SlidingWindow] = {}
        self._admitted = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = self._windows.setdefault(client_ip, SlidingWindow())

        now = time.time()
        retry_after = window.admit(
            now, settings.rate_limit_requests, settings.rate_limit_window
        )
        if retry_after is not None:
            logger.warning(
                "Rate limit exceeded for IP %s on %s %s (retry in %ds)",
                client_ip, request.method, request.url.path, retry_after,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many requests. Retry in {retry_after} seconds.",
                    "details": {"retry_after": retry_after},
                    "request_id": request.headers.get("X-Request-ID"),
                },
                headers={"Retry-After": str(retry_after)},
            )

        self._admitted += 1
        if self._admitted % self.CLEANUP_EVERY == 0:
            self._forget_idle_clients(now - settings.rate_limit_window)

        return await call_next(request)

    def _forget_idle_clients(self, window_start: float) -> None:
        idle = []
        for ip, window in self._windows.items():
            window.prune(window_start)
            if not window.hits:
                idle.append(ip)
        for ip in idle:
            del self._windows[ip]

        if idle:
            logger.debug("Forgot %d idle rate-limit windows", len(idle))
