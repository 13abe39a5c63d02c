"""Request pipeline stages: per-client rate limiting and failure handling."""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from cachetools import TTLCache
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started_at: float
    count: int = 0


class FixedWindowRateLimiter:
    """In-memory fixed-window rate limiter keyed by client address.

    Each client gets `max_requests` per window; the window starts at the
    client's first request and resets once `window_seconds` have elapsed.
    Ended windows are dropped on every hit.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._timer = timer
        self._windows: TTLCache = TTLCache(maxsize=math.inf, ttl=window_seconds, timer=timer)
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            self._windows.expire()
            return len(self._windows)

    def hit(self, client_id: str) -> tuple[bool, int, int]:
        """Record a request for a client.

        Args:
            client_id: Client address

        Returns:
            (allowed, remaining requests in window, seconds until window resets)
        """
        now = self._timer()
        with self._lock:
            self._windows.expire()
            window = self._windows.get(client_id)
            if window is None:
                window = _Window(started_at=now)
                self._windows[client_id] = window
            reset_in = math.ceil(window.started_at + self.window_seconds - now)
            if window.count >= self.max_requests:
                return False, 0, reset_in
            window.count += 1
            return True, self.max_requests - window.count, reset_in


def _extract_client_ip(request: Request, trust_forwarded_for: bool = False) -> str:
    """Extract client IP from the socket, or from X-Forwarded-For behind a trusted proxy."""
    if trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects clients exceeding the request ceiling with 429.

    The limiter is read from the server context on `app.state` at request time.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        context = request.app.state.context
        limiter: FixedWindowRateLimiter = context.rate_limiter
        client_ip = _extract_client_ip(request, context.settings.trust_forwarded_for)
        allowed, remaining, reset_in = limiter.hit(client_ip)
        headers = {
            "X-RateLimit-Limit": str(limiter.max_requests),
            "X-RateLimit-Remaining": str(remaining),
        }
        if not allowed:
            logger.warning("Rate limit exceeded for %s", client_ip)
            return JSONResponse(
                status_code=429,
                content={"error": "rate_limited", "message": "Too many requests, try again later."},
                headers={**headers, "Retry-After": str(reset_in)},
            )
        response = await call_next(request)
        response.headers.update(headers)
        return response


class UnhandledFailureMiddleware(BaseHTTPMiddleware):
    """Turns any exception escaping a route into a generic 500 response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"error": "server_error", "message": "Internal server error"},
            )
