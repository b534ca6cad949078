import math
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.exceptions import error_body
from src.logging_config import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


class FixedWindowCounter:
    """Count hits per key inside fixed windows of ``window_seconds``."""

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._window: Optional[int] = None
        self._hits: Dict[str, int] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> Tuple[bool, int]:
        """Record a hit; return (allowed, seconds until the window resets)"""
        now = self.clock()
        window = int(now // self.window_seconds)
        retry_after = max(1, math.ceil((window + 1) * self.window_seconds - now))

        with self._lock:
            if window != self._window:
                self._window = window
                self._hits.clear()
            count = self._hits.get(key, 0) + 1
            self._hits[key] = count

        return count <= self.limit, retry_after


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests over the per-client quota with 429 before routing."""

    def __init__(self, app, limit: int, window_seconds: int, path_prefix: str = "", counter: Optional[FixedWindowCounter] = None):
        super().__init__(app)
        self.path_prefix = path_prefix
        self.counter = counter or FixedWindowCounter(limit, window_seconds)

    def _covers(self, path: str) -> bool:
        if not self.path_prefix:
            return True
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def dispatch(self, request: Request, call_next):
        if not self._covers(request.url.path):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        allowed, retry_after = self.counter.hit(client)
        if not allowed:
            logger.warning("Rate limit exceeded", extra={"client": client, "path": request.url.path})
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=error_body(RATE_LIMIT_MESSAGE),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach conservative browser security headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response
