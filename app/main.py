"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Database schema and the optional in-process batch scheduler

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import settings
from app.infrastructure.database import init_schema
from app.infrastructure.scheduler import BatchScheduler
from app.interfaces.accounts.router import auth_router, users_router, webhooks_router
from app.interfaces.alerts.router import router as alerts_router
from app.interfaces.budget.router import router as budget_router
from app.interfaces.cron.jobs import build_batch_jobs
from app.interfaces.cron.router import router as cron_router
from app.interfaces.dependencies import get_engine, get_notifier, get_price_feed
from app.interfaces.health import router as health_router
from app.interfaces.ranking.router import router as ranking_router
from app.interfaces.trading.router import (
    futures_router,
    reports_router,
    simulator_router,
)
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and start/stop the batch scheduler."""
    engine = app.dependency_overrides.get(get_engine, get_engine)()
    init_schema(engine)

    scheduler = None
    if settings.scheduler_enabled:
        price_feed = app.dependency_overrides.get(get_price_feed, get_price_feed)()
        notifier = app.dependency_overrides.get(get_notifier, get_notifier)()
        scheduler = BatchScheduler(
            jobs=build_batch_jobs(engine, price_feed, notifier),
            liquidation_minutes=settings.liquidation_interval_minutes,
            trade_exits_minutes=settings.trade_exits_interval_minutes,
            alerts_minutes=settings.alerts_interval_minutes,
        )
        scheduler.start()
    else:
        logger.info("In-process scheduler disabled; batch jobs run via /cron.")

    app.state.scheduler = scheduler
    yield

    if scheduler is not None:
        scheduler.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    for router in (
        health_router,
        auth_router,
        users_router,
        webhooks_router,
        simulator_router,
        futures_router,
        reports_router,
        ranking_router,
        alerts_router,
        budget_router,
        cron_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
