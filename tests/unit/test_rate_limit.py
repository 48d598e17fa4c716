"""
Unit tests for the rate limiting middleware
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from redis.exceptions import ConnectionError as RedisConnectionError

from gigwallet.middleware.rate_limit import RateLimitConfig, RateLimitMiddleware


def make_redis(count=1, ttl=30):
    """Redis mock whose INCR pipeline returns (count, ttl)."""
    redis_client = MagicMock()
    redis_client.expire = AsyncMock(return_value=True)
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[count, ttl])
    redis_client.pipeline.return_value = pipe
    return redis_client


def make_app(redis_client):
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, redis_client=redis_client)

    @app.post("/api/v1/withdrawals/")
    async def withdraw():
        return {"ok": True}

    @app.get("/api/v1/gigs")
    async def gigs():
        return {"gigs": []}

    return app


async def call(app, method, path):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.request(method, path)


class TestRateLimitMiddleware:

    @pytest.mark.asyncio
    async def test_no_redis_means_no_limit(self):
        response = await call(make_app(None), "POST", "/api/v1/withdrawals/")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_request_is_counted_before_it_runs(self):
        redis_client = make_redis(count=1, ttl=3590)
        response = await call(make_app(redis_client), "POST", "/api/v1/withdrawals/")

        assert response.status_code == 200
        redis_client.pipeline.assert_called_once_with(transaction=True)
        pipe = redis_client.pipeline.return_value
        pipe.incr.assert_called_once_with("rate_limit:withdrawal:127.0.0.1")
        pipe.ttl.assert_called_once_with("rate_limit:withdrawal:127.0.0.1")
        redis_client.expire.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_request_in_window_sets_expiry(self):
        redis_client = make_redis(count=1, ttl=-1)
        response = await call(make_app(redis_client), "POST", "/api/v1/withdrawals/")

        assert response.status_code == 200
        redis_client.expire.assert_awaited_once_with(
            "rate_limit:withdrawal:127.0.0.1", RateLimitConfig.WITHDRAWAL_LIMITS["window"]
        )

    @pytest.mark.asyncio
    async def test_last_request_at_limit_is_allowed(self):
        limit = RateLimitConfig.WITHDRAWAL_LIMITS["requests"]
        response = await call(make_app(make_redis(count=limit)), "POST", "/api/v1/withdrawals/")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_request_over_limit_is_rejected(self):
        limit = RateLimitConfig.WITHDRAWAL_LIMITS["requests"]
        redis_client = make_redis(count=limit + 1, ttl=42)
        response = await call(make_app(redis_client), "POST", "/api/v1/withdrawals/")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        assert response.json()["detail"] == "Rate limit exceeded"

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_counter(self):
        # Counter values as Redis would hand them out to a burst of requests
        limit = RateLimitConfig.WITHDRAWAL_LIMITS["requests"]
        redis_client = make_redis()
        redis_client.pipeline.return_value.execute.side_effect = [
            [n, 3600] for n in range(1, limit + 3)
        ]
        app = make_app(redis_client)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            responses = await asyncio.gather(
                *[client.post("/api/v1/withdrawals/") for _ in range(limit + 2)]
            )

        codes = [r.status_code for r in responses]
        assert codes.count(200) == limit
        assert codes.count(429) == 2


    @pytest.mark.asyncio
    async def test_unlimited_path_skips_redis(self):
        redis_client = make_redis(count=999)
        response = await call(make_app(redis_client), "GET", "/api/v1/gigs")

        assert response.status_code == 200
        redis_client.pipeline.assert_not_called()

    @pytest.mark.asyncio
    async def test_redis_failure_lets_request_through(self):
        redis_client = make_redis()
        redis_client.pipeline.return_value.execute.side_effect = RedisConnectionError("redis down")
        response = await call(make_app(redis_client), "POST", "/api/v1/withdrawals/")

        assert response.status_code == 200


def test_unknown_endpoint_type_uses_global_setting():
    limits = RateLimitConfig.get_limits_for_endpoint("something-else")
    assert limits == {"requests": 30, "window": 60}
