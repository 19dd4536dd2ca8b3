"""
Arboriza Backend - Rate Limiting Middleware
============================================

What:  Per-client-IP request limit in front of every route
       (default 1000 requests per 15 minutes).
How:   Sliding window kept in memory: each IP maps to the timestamps of its
       requests inside the current window. Once the count reaches the limit
       the request is answered with 429 and a Retry-After header.

Algorithm: Sliding Window Log
    1. Drop the IP's timestamps older than now - window
    2. If the remaining count >= limit, reject with 429
    3. Otherwise record now and let the request through

Limits are per process. Running several uvicorn workers multiplies the
effective limit by the worker count.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from arboriza.exceptions import RateLimitExceededError, error_body

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        max_requests:   requests allowed per IP inside one window
        window_seconds: window length in seconds

    Excluded paths: the interactive API docs.
    """

    EXCLUDED_PATHS = {"/docs", "/openapi.json", "/redoc"}

    # Inactive IPs are purged every this many recorded requests
    CLEANUP_EVERY = 1000

    def __init__(self, app, max_requests: int = 1000, window_seconds: int = 900, **kwargs):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - self.window_seconds

        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window_seconds,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content=error_body(exc.error_code, exc.message, exc.context),
                headers={"Retry-After": str(exc.retry_after)},
            )

        timestamps.append(now)

        self._recorded += 1
        if self._recorded % self.CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs with no request inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
