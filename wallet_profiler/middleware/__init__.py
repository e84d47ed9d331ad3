from .logging_middleware import RequestLoggingMiddleware
from .rate_limit import (
    InMemoryWindowBackend,
    RateLimiter,
    RateLimitExceeded,
    RateLimitMiddleware,
    RateLimitResult,
    RedisWindowBackend,
    get_rate_limiter,
)

__all__ = [
    "InMemoryWindowBackend",
    "RateLimiter",
    "RateLimitExceeded",
    "RateLimitMiddleware",
    "RateLimitResult",
    "RedisWindowBackend",
    "RequestLoggingMiddleware",
    "get_rate_limiter",
]
