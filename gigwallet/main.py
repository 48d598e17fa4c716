"""
GigWallet FastAPI Application
Main entry point for the application
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
import redis.asyncio as redis

from gigwallet import __version__
from gigwallet.core.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Sentry integration
if settings.sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
    from sentry_sdk.integrations.celery import CeleryIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
            CeleryIntegration(),
        ],
        traces_sample_rate=0.1,
        environment=settings.app_env,
    )

from gigwallet.api.health import router as health_router
from gigwallet.api.v1.auth import router as auth_router
from gigwallet.api.v1.gigs import router as gigs_router
from gigwallet.api.v1.wallet import router as wallet_router
from gigwallet.api.v1.payments import router as payments_router
from gigwallet.api.v1.withdrawals import router as withdrawals_router
from gigwallet.api.v1.payment_methods import router as payment_methods_router
from gigwallet.api.v1.reviews import router as reviews_router
from gigwallet.api.v1.verification import router as verification_router
from gigwallet.api.v1.admin import router as admin_router
from gigwallet.api.v1.webhooks import router as webhooks_router
from gigwallet.middleware.rate_limit import RateLimitMiddleware

# Prometheus metrics
REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
ACTIVE_CONNECTIONS = Gauge('http_active_connections', 'Number of active HTTP connections')

app = FastAPI(
    title="GigWallet API",
    description="Gig marketplace wallet, payments and payouts",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

rate_limit_redis = redis.from_url(settings.redis_url) if settings.rate_limit_enabled else None
app.add_middleware(RateLimitMiddleware, redis_client=rate_limit_redis)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start_time = time.time()
    ACTIVE_CONNECTIONS.inc()
    status_code = 500

    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        duration = time.time() - start_time
        ACTIVE_CONNECTIONS.dec()
        # Label by route template, not raw path
        route = request.scope.get("route")
        endpoint = route.path if route is not None else "unmatched"
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status_code).inc()
        REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(duration)


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


prefix = settings.api_v1_prefix

app.include_router(health_router, prefix=prefix, tags=["health"])
app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["authentication"])
app.include_router(gigs_router, prefix=prefix, tags=["gigs"])
app.include_router(wallet_router, prefix=f"{prefix}/wallet", tags=["wallet"])
app.include_router(payments_router, prefix=f"{prefix}/payments", tags=["payments"])
app.include_router(withdrawals_router, prefix=f"{prefix}/withdrawals", tags=["withdrawals"])
app.include_router(payment_methods_router, prefix=f"{prefix}/payment-methods", tags=["payment methods"])
app.include_router(reviews_router, prefix=prefix, tags=["reviews"])
app.include_router(verification_router, prefix=f"{prefix}/verification", tags=["verification"])
app.include_router(admin_router, prefix=f"{prefix}/admin", tags=["admin"])
app.include_router(webhooks_router, prefix=f"{prefix}/webhooks", tags=["webhooks"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {"name": settings.app_name, "version": __version__, "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gigwallet.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
