"""
Rate limiting middleware using Redis fixed-window counters

Each request increments its window's counter before anything else, so two
concurrent requests can never both see the same count.
"""

import logging
from typing import Dict, Optional, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from redis.exceptions import RedisError

from gigwallet.core.config import settings

# Configure logging
logger = logging.getLogger(__name__)


class RateLimitConfig:
    """Rate limits per endpoint group"""

    WEBHOOK_LIMITS = {"requests": 60, "window": 60}
    AUTH_LIMITS = {"requests": 10, "window": 300}
    PAYMENT_LIMITS = {"requests": 10, "window": 60}
    WITHDRAWAL_LIMITS = {"requests": 3, "window": 3600}

    @classmethod
    def get_limits_for_endpoint(cls, endpoint_type: str) -> Dict[str, int]:
        """Get rate limits for an endpoint group; unknown groups use the global setting"""
        limits_map = {
            "webhook": cls.WEBHOOK_LIMITS,
            "auth": cls.AUTH_LIMITS,
            "payment": cls.PAYMENT_LIMITS,
            "withdrawal": cls.WITHDRAWAL_LIMITS,
        }
        return limits_map.get(
            endpoint_type,
            {"requests": settings.rate_limit_requests, "window": settings.rate_limit_window_seconds}
        )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware; a no-op without a Redis client"""

    def __init__(self, app, redis_client=None):
        super().__init__(app)
        self.redis_client = redis_client

    async def dispatch(self, request: Request, call_next):
        """Process request with rate limiting"""
        if not self.redis_client:
            return await call_next(request)

        endpoint_type = self._get_endpoint_type(request)
        if not endpoint_type:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        rate_limit_key = f"rate_limit:{endpoint_type}:{client_ip}"
        limits = RateLimitConfig.get_limits_for_endpoint(endpoint_type)

        is_allowed, retry_after = await self._check_rate_limit(rate_limit_key, limits)

        if not is_allowed:
            logger.warning(f"Rate limit exceeded for key: {rate_limit_key}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "detail": "Rate limit exceeded",
                    "retry_after": retry_after
                },
                headers={"Retry-After": str(retry_after)}
            )

        return await call_next(request)

    def _get_endpoint_type(self, request: Request) -> Optional[str]:
        """Endpoint group for the request path, or None when unlimited"""
        path = request.url.path
        prefix = settings.api_v1_prefix

        if path.startswith(f"{prefix}/webhooks/"):
            return "webhook"
        if path.startswith(f"{prefix}/auth/"):
            return "auth"
        if path.startswith(f"{prefix}/payments/") and request.method == "POST":
            return "payment"
        if path.startswith(f"{prefix}/withdrawals") and request.method == "POST":
            return "withdrawal"

        return None

    async def _check_rate_limit(self, key: str, limits: Dict[str, int]) -> Tuple[bool, int]:
        """
        Count this request and check it against the limit.

        INCR and TTL run in one MULTI/EXEC; the count returned by INCR
        decides, so the read and the write cannot interleave with another
        request. The window expiry is set by whichever request finds the key
        without one.
        """
        try:
            pipe = self.redis_client.pipeline(transaction=True)
            pipe.incr(key)
            pipe.ttl(key)
            request_count, ttl = await pipe.execute()

            if ttl < 0:
                await self.redis_client.expire(key, limits["window"])
                ttl = limits["window"]

            if request_count > limits["requests"]:
                return False, max(1, ttl)

            return True, 0

        except RedisError as e:
            # Fail open when Redis is unavailable
            logger.error(f"Error checking rate limit for key {key}: {e}")
            return True, 0
