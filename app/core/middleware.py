"""HTTP middleware: rate limiting, request logging and security headers."""

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

import redis.asyncio as redis

from app.config import settings
from app.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

UNLIMITED_PATHS = frozenset({"/", "/health", "/docs", "/redoc", "/openapi.json"})
WINDOW_SECONDS = 60

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cache-Control": "no-store",
}


def client_address(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else "unknown")


def is_booking_write(request: Request) -> bool:
    return request.method == "POST" and request.url.path.startswith(f"{settings.api_prefix}/bookings")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client sliding window in Redis.

    Booking writes are counted in their own, tighter bucket.
    """

    def __init__(
        self,
        app,
        requests_per_minute: int = 100,
        booking_writes_per_minute: int | None = None,
        redis_url: str | None = None,
    ):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.booking_writes_per_minute = (
            booking_writes_per_minute or settings.booking_rate_limit_per_minute
        )
        self.redis_url = redis_url or settings.redis_url
        self._redis: redis.Redis | None = None

    async def get_redis(self) -> redis.Redis:
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url, encoding="utf-8", decode_responses=True)
        return self._redis

    async def _window_count(self, key: str, now: int) -> int:
        """Add this request to the window and return the count seen before it."""
        client = await self.get_redis()
        async with client.pipeline(transaction=True) as pipe:
            await pipe.zremrangebyscore(key, 0, now - WINDOW_SECONDS)
            await pipe.zcard(key)
            await pipe.zadd(key, {uuid.uuid4().hex: now})
            await pipe.expire(key, WINDOW_SECONDS)
            _, seen, _, _ = await pipe.execute()
        return seen

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in UNLIMITED_PATHS:
            return await call_next(request)

        if is_booking_write(request):
            bucket, limit = "bookings", self.booking_writes_per_minute
        else:
            bucket, limit = "api", self.requests_per_minute
        key = f"rate_limit:{bucket}:{client_address(request)}"
        now = int(time.time())

        try:
            seen = await self._window_count(key, now)
        except redis.RedisError as e:
            logger.warning("Rate limiter unavailable (%s), request allowed", e)
            return await call_next(request)

        limit_headers = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": str(max(0, limit - seen - 1)),
            "X-RateLimit-Reset": str(now + WINDOW_SECONDS),
        }
        if seen >= limit:
            exc = RateLimitExceeded()
            logger.info("Rate limit hit for %s (%s bucket)", key, bucket)
            return JSONResponse(
                status_code=exc.status_code,
                content={**exc.to_dict(), "retry_after": WINDOW_SECONDS},
                headers={**limit_headers, "Retry-After": str(WINDOW_SECONDS)},
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome and latency."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.1f}ms"

        log = logger.warning if elapsed_ms > settings.slow_request_threshold_ms else logger.debug
        log(
            "%s %s -> %d in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
