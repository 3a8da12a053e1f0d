"""
Tasklane Backend — Request Logging Middleware
===============================================

What:  One access log line per request: method, route, status, duration.
Who:   Logs to the `tasklane.access` logger; health probes are skipped.

Routes are logged by template (/api/boards/{board_id}) so lines for the
same endpoint group together; the concrete board id goes into `extra`.

Level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO.

Request bodies (item titles and content) are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("tasklane.access")

SKIPPED_PATHS = {"/health"}


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _route_template(request: Request) -> str:
    # Set by the router once a route matched; unmatched paths log as-is
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        route = _route_template(request)
        rid = request_id_var.get("")
        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s]",
            request.method,
            route,
            response.status_code,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "route": route,
                "board_id": request.path_params.get("board_id"),
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": request.client.host if request.client else None,
            },
        )
        return response
