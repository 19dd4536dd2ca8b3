"""
Arboriza Backend - Request Logging Middleware
==============================================

What:  One access log line per HTTP request on the `arboriza.access` logger.
How:   Times everything below this middleware, then logs the request line
       (path plus query string, so species/plant searches can be read back
       from the log), the status, the duration, the request ID and the
       client IP. The liveness probe and the docs are not logged.

Log levels:
    5xx → ERROR, 4xx → WARNING (403 on a room post, 429 from the limiter...),
    anything else → INFO

Request bodies are never logged: registration and login carry passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from arboriza.middleware.request_id import request_id_var

logger = logging.getLogger("arboriza.access")

QUIET_PATHS = frozenset({"/api/health", "/docs", "/redoc", "/openapi.json"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        client_ip = request.client.host if request.client else "unknown"
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        rid = request_id_var.get("")
        logger.log(
            _level_for(response.status_code),
            "[%s] %s %s -> %d in %.1fms (%s)",
            rid,
            request.method,
            target,
            response.status_code,
            elapsed_ms,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
