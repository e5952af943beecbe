"""SWAP HRIS — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from swap_hris.common.exceptions import register_exception_handlers
from swap_hris.common.rate_limit import limiter
from swap_hris.config import settings
from swap_hris.dashboard.router import router as dashboard_router
from swap_hris.dashboard.service import DashboardStore
from swap_hris.database import engine
from swap_hris.tasks.router import router as tasks_router

logger = logging.getLogger("swap_hris")


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("SWAP HRIS starting (%s)", settings.ENVIRONMENT)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="SWAP HRIS",
        description="HR dashboard service — critical alerts, statistics and tasks",
        version="2.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # One snapshot per app instance, replaced on refresh
    app.state.dashboard_store = DashboardStore()

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "2.0.0",
            "environment": settings.ENVIRONMENT,
            "timezone": settings.BUSINESS_TIMEZONE,
        }

    # Register routers
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["dashboard"])
    app.include_router(tasks_router, prefix="/api/v1/tasks", tags=["tasks"])

    return app


app = create_app()
