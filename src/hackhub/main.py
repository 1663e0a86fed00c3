"""
HackHub API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database and Redis connections
- Stats cache and background job scheduler
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from hackhub.api import api_router
from hackhub.core.cache import StatsCache
from hackhub.core.config import settings
from hackhub.core.database import async_session_maker, close_db, init_db
from hackhub.core.errors import ServiceError, service_error_handler
from hackhub.core.redis import close_redis, get_redis, init_redis
from hackhub.core.scheduler import start_scheduler, stop_scheduler
from hackhub.modules.applicant_auth.jobs import register_applicant_auth_jobs

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection (rate limiting falls back to memory without it)
    - Database connection
    - Background job scheduler
    """
    # Startup
    print(f"Starting HackHub API in {settings.python_env} mode...")

    app.state.stats_cache = StatsCache(settings.stats_cache_ttl_seconds)

    # Initialize Redis
    try:
        await init_redis()
        print("[OK] Redis connected")
    except Exception as e:
        print(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize Database
    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize Background Job Scheduler
    try:
        register_applicant_auth_jobs()
        await start_scheduler()
        print("[OK] Background scheduler started")
    except Exception as e:
        print(f"[FAIL] Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down HackHub API...")

    await stop_scheduler()
    print("[OK] Background scheduler stopped")

    await close_redis()
    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="HackHub API",
    description="Hackathon registration, submission and review API",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.add_exception_handler(ServiceError, service_error_handler)

app.include_router(api_router, prefix="/api")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to HackHub API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check: reports database and Redis reachability."""
    checks = {"status": "ready", "database": "connected", "redis": "connected"}

    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check: database unavailable: {e}")
        checks["database"] = "unavailable"
        checks["status"] = "degraded"

    client = await get_redis()
    if client is None:
        checks["redis"] = "not initialized"
    else:
        try:
            await client.ping()
        except Exception as e:
            logger.warning(f"Readiness check: redis unavailable: {e}")
            checks["redis"] = "unavailable"

    return checks
