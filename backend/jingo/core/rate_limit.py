"""
Rate limiting middleware for Jingo Jump API
Uses in-memory storage with sliding window algorithm
"""
import hashlib
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Tuple

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from jingo.core.config import settings


class RateLimiter:
    """
    Sliding-window request counter keyed by caller.

    Each key keeps the timestamps of its accepted requests, oldest first.
    State is per process; multiple workers each keep their own window.
    """

    def __init__(self, cleanup_interval: int = 60):
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_sweep = time.time()
        self._cleanup_interval = cleanup_interval

    @staticmethod
    def _prune(hits: Deque[float], window_start: float) -> None:
        while hits and hits[0] <= window_start:
            hits.popleft()

    def _sweep(self, now: float, window_seconds: int) -> None:
        """Drop idle keys so the table does not grow with one-off callers"""
        if now - self._last_sweep < self._cleanup_interval:
            return

        for key in list(self._hits):
            self._prune(self._hits[key], now - window_seconds)
            if not self._hits[key]:
                del self._hits[key]

        self._last_sweep = now

    def is_allowed(
        self,
        identifier: str,
        max_requests: int,
        window_seconds: int = 60
    ) -> Tuple[bool, int, int]:
        """
        Record a request for `identifier` if it fits in the window.

        Returns:
            (allowed, remaining requests, seconds until a slot frees up)
        """
        now = time.time()
        self._sweep(now, window_seconds)

        hits = self._hits[identifier]
        self._prune(hits, now - window_seconds)

        if len(hits) >= max_requests:
            retry_after = int(hits[0] + window_seconds - now) + 1 if hits else 1
            return False, 0, retry_after

        hits.append(now)
        return True, max_requests - len(hits), 0

    def reset(self):
        self._hits.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()

# Paths that are exempt from rate limiting
EXEMPT_PATHS = {
    "/",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware that applies rate limiting based on authentication status.

    Rate limits (per minute):
    - Bearer token callers: RATE_LIMIT_AUTHENTICATED
    - Everyone else, by client IP: RATE_LIMIT_UNAUTHENTICATED

    Headers returned:
    - X-RateLimit-Limit: Maximum requests per window
    - X-RateLimit-Remaining: Remaining requests in current window
    - X-RateLimit-Reset: Seconds until the window resets (when limited)
    """

    def __init__(self, app, limiter: RateLimiter = None):
        super().__init__(app)
        self.limiter = limiter or rate_limiter

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        # CORS preflight
        if request.method == "OPTIONS":
            return await call_next(request)

        identifier, limit = self._get_identifier_and_limit(request)

        is_allowed, remaining, retry_after = self.limiter.is_allowed(
            identifier=identifier,
            max_requests=limit,
            window_seconds=60
        )

        if not is_allowed:
            # Return a response instead of raising so it still passes through CORS
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Rate limit exceeded. Please slow down."},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(retry_after),
                    "Retry-After": str(retry_after),
                }
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response

    def _get_identifier_and_limit(self, request: Request) -> Tuple[str, int]:
        """
        Determine the rate limit identifier and limit.

        Priority:
        1. JWT token (Authorization: Bearer header)
        2. IP address (unauthenticated)
        """
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token_hash = hashlib.sha256(auth_header.encode()).hexdigest()[:32]
            return f"jwt:{token_hash}", settings.RATE_LIMIT_AUTHENTICATED

        client_ip = self._get_client_ip(request)
        return f"ip:{client_ip}", settings.RATE_LIMIT_UNAUTHENTICATED

    def _get_client_ip(self, request: Request) -> str:
        """Get the client IP, considering proxies"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First IP in the chain is the original client
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"
