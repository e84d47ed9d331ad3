"""
Rate limiting middleware.

Sliding window rate limiter keyed by path and client. Windows live in
Redis when ``redis_url`` is configured, otherwise in process memory.
"""

import asyncio
import logging
import time
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable, Deque, Dict, List, Optional, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset: int  # seconds until the oldest request leaves the window

    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }


class RateLimitExceeded(Exception):
    """Rate limit has been exceeded."""
    def __init__(self, result: RateLimitResult, window_seconds: int):
        self.result = result
        self.limit = result.limit
        self.window_seconds = window_seconds
        self.retry_after = max(result.reset, 1)
        super().__init__(f"Rate limit exceeded: {self.limit} requests per {window_seconds}s")


class WindowBackend(Protocol):
    async def hit(self, key: str, limit: int, window_seconds: int, now: float) -> RateLimitResult:
        ...


class InMemoryWindowBackend:
    """Per-process windows: a deque of request timestamps per key."""

    def __init__(self):
        self._windows: Dict[str, Deque[float]] = {}
        self._lock = asyncio.Lock()

    async def hit(self, key: str, limit: int, window_seconds: int, now: float) -> RateLimitResult:
        async with self._lock:
            window = self._windows.setdefault(key, deque())
            cutoff = now - window_seconds
            while window and window[0] <= cutoff:
                window.popleft()

            if len(window) >= limit:
                reset = int(window[0] + window_seconds - now) + 1
                return RateLimitResult(False, limit, 0, reset)

            window.append(now)
            reset = int(window[0] + window_seconds - now) + 1
            return RateLimitResult(True, limit, limit - len(window), reset)

    def reset(self) -> None:
        self._windows.clear()


class RedisWindowBackend:
    """Shared windows: one sorted set of request timestamps per key."""

    def __init__(self, client: Optional[aioredis.Redis] = None, url: Optional[str] = None):
        self._client = client or aioredis.from_url(url or settings.redis_url)

    async def hit(self, key: str, limit: int, window_seconds: int, now: float) -> RateLimitResult:
        redis_key = f"ratelimit:{key}"
        cutoff = now - window_seconds

        async with self._client.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(redis_key, 0, cutoff)
            pipe.zcard(redis_key)
            pipe.zrange(redis_key, 0, 0, withscores=True)
            _, count, oldest = await pipe.execute()

        oldest_ts = oldest[0][1] if oldest else now
        reset = int(oldest_ts + window_seconds - now) + 1
        if count >= limit:
            return RateLimitResult(False, limit, 0, reset)

        async with self._client.pipeline(transaction=True) as pipe:
            pipe.zadd(redis_key, {f"{now}:{uuid.uuid4().hex[:8]}": now})
            pipe.expire(redis_key, window_seconds)
            await pipe.execute()

        return RateLimitResult(True, limit, limit - count - 1, reset)


class RateLimiter:
    """Sliding window rate limiter."""

    def __init__(
        self,
        backend: Optional[WindowBackend] = None,
        limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        if backend is None:
            backend = RedisWindowBackend() if settings.has_redis else InMemoryWindowBackend()
        self.backend = backend
        self.limit = limit or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window_seconds
        self._clock = clock

    async def check(self, key: str) -> RateLimitResult:
        """Record a request for ``key``; Redis failures allow the request."""
        try:
            return await self.backend.hit(key, self.limit, self.window_seconds, self._clock())
        except RedisError as exc:
            # Fail open
            logger.warning("Rate limit backend unavailable, allowing request: %s", exc)
            return RateLimitResult(True, self.limit, self.limit, self.window_seconds)

    async def check_request(self, request: Request) -> RateLimitResult:
        """Raise RateLimitExceeded when the client is over its limit."""
        client = request.client.host if request.client else "unknown"
        key = f"{request.url.path}:{client}"

        result = await self.check(key)
        if not result.allowed:
            raise RateLimitExceeded(result, self.window_seconds)
        return result


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for rate limiting.
    """

    def __init__(
        self,
        app,
        rate_limiter: Optional[RateLimiter] = None,
        exclude_paths: Optional[List[str]] = None,
    ):
        super().__init__(app)
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self.exclude_paths = exclude_paths or [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/healthz",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if path == "/" or any(path.startswith(p) for p in self.exclude_paths):
            return await call_next(request)

        try:
            result = await self.rate_limiter.check_request(request)
        except RateLimitExceeded as e:
            logger.warning("Rate limit exceeded for %s", path)
            return JSONResponse(
                {"error": "Rate limit exceeded", "retry_after": e.retry_after},
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={
                    "Retry-After": str(e.retry_after),
                    "X-RateLimit-Window": str(e.window_seconds),
                    **e.result.headers(),
                },
            )

        response = await call_next(request)
        for name, value in result.headers().items():
            response.headers[name] = value
        return response


# Singleton instance
_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get the singleton rate limiter instance."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter()
    return _rate_limiter
