"""Custom middleware for the application."""

import logging
import time
import uuid

import redis.asyncio as redis
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from haulbook.config import settings
from haulbook.core.exceptions import RateLimitExceeded
from haulbook.schemas.common import error_body

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW_SECONDS = 60
SLOW_REQUEST_SECONDS = 1.0


async def _sliding_window_count(client: redis.Redis, key: str, now: float) -> int:
    """Record a hit and return how many hits the key had inside the window."""
    async with client.pipeline(transaction=True) as pipe:
        await pipe.zremrangebyscore(key, 0, now - RATE_LIMIT_WINDOW_SECONDS)
        await pipe.zcard(key)
        await pipe.zadd(key, {uuid.uuid4().hex: now})
        await pipe.expire(key, RATE_LIMIT_WINDOW_SECONDS)
        results = await pipe.execute()
    return results[1]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware using Redis sliding window."""

    def __init__(
        self,
        app,
        requests_per_minute: int = 100,
        redis_url: str | None = None,
    ):
        """Initialize rate limiter.

        Args:
            app: FastAPI application
            requests_per_minute: Max requests per minute per IP
            redis_url: Redis connection URL
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.redis_url = redis_url or settings.redis_url
        self._redis: redis.Redis | None = None

    async def get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP from request."""
        # Behind proxy/load balancer
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in ("/health", "/docs", "/redoc", "/openapi.json"):
            return await call_next(request)

        now = time.time()
        try:
            redis_client = await self.get_redis()
            request_count = await _sliding_window_count(
                redis_client, f"rate_limit:{self._get_client_ip(request)}", now
            )
        except redis.RedisError as e:
            # Fail open
            logger.warning(f"Rate limiter unavailable, allowing request: {e}")
            return await call_next(request)

        reset_at = str(int(now) + RATE_LIMIT_WINDOW_SECONDS)
        if request_count >= self.requests_per_minute:
            exc = RateLimitExceeded()
            return JSONResponse(
                status_code=exc.status_code,
                content=error_body(exc.detail, exc.code),
                headers={
                    "Retry-After": str(RATE_LIMIT_WINDOW_SECONDS),
                    "X-RateLimit-Limit": str(self.requests_per_minute),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": reset_at,
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)
        response.headers["X-RateLimit-Remaining"] = str(
            max(0, self.requests_per_minute - request_count - 1)
        )
        response.headers["X-RateLimit-Reset"] = reset_at
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and response times."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.time()

        request_id = request.headers.get("X-Request-ID") or str(time.time_ns())
        request.state.request_id = request_id

        response = await call_next(request)

        duration = time.time() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        if duration > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request {request_id}: {request.method} {request.url.path} "
                f"took {duration:.3f}s"
            )
        else:
            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {duration:.3f}s"
            )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if not settings.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class RateLimiter:
    """Per-endpoint rate limiter used as a dependency."""

    def __init__(
        self,
        requests_per_minute: int = 10,
        key_prefix: str = "api",
    ):
        self.requests_per_minute = requests_per_minute
        self.key_prefix = key_prefix
        self._redis: redis.Redis | None = None

    async def get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    async def __call__(self, request: Request) -> None:
        """Check rate limit for request.

        Raises:
            RateLimitExceeded: If rate limit exceeded
        """
        if settings.environment == "development":
            return

        client_id = request.client.host if request.client else "unknown"
        key = f"rate:{self.key_prefix}:{client_id}"
        try:
            redis_client = await self.get_redis()
            count = await _sliding_window_count(redis_client, key, time.time())
        except redis.RedisError as e:
            logger.warning(f"Rate limiter '{self.key_prefix}' unavailable: {e}")
            return

        if count >= self.requests_per_minute:
            raise RateLimitExceeded()


# Pre-configured rate limiters for public or write-heavy endpoints
booking_limiter = RateLimiter(requests_per_minute=10, key_prefix="booking")
support_limiter = RateLimiter(requests_per_minute=5, key_prefix="support")
