"""FastAPI application for the Channel Desk API."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from channeldesk import __version__
from channeldesk.config import settings
from channeldesk.database import engine
from channeldesk.exceptions import register_exception_handlers
from channeldesk.logger import app_logger, db_logger, redis_logger
from channeldesk.redis_client import redis_client
from channeldesk.routers import auth, videos, comments, notes

app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production else None,
    openapi_url=f"{settings.api_prefix}/openapi.json",
)

# Every error leaves the API as a {success, error, message} envelope
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

if settings.is_production:
    # Only accept the hosts the dashboard is served from
    trusted_hosts = [
        origin.replace("https://", "").replace("http://", "")
        for origin in settings.cors_origins
    ]
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=trusted_hosts + ["*.vercel.app"],
    )

app.include_router(auth.router, prefix=settings.api_prefix, tags=["Authentication"])
app.include_router(videos.router, prefix=settings.api_prefix, tags=["Videos"])
app.include_router(comments.router, prefix=settings.api_prefix, tags=["Comments"])
app.include_router(notes.router, prefix=settings.api_prefix, tags=["Notes"])


def database_status() -> str:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return "connected"
    except SQLAlchemyError as e:
        db_logger.error(f"Database check failed: {e}")
        return f"error: {e}"


def redis_status() -> str:
    """Redis is optional; without it the channel listing is simply not cached."""
    if not redis_client.client:
        return "disconnected"
    try:
        redis_client.client.ping()
        return "connected"
    except RedisError as e:
        redis_logger.warning(f"Redis check failed: {e}")
        return f"error: {e}"


@app.on_event("startup")
async def startup_event():
    app_logger.info(
        f"Starting {settings.app_name} {__version__} "
        f"(environment={settings.environment}, debug={settings.debug})"
    )
    db_logger.info(f"Database: {database_status()}")
    redis_logger.info(f"Redis: {redis_status()}")


@app.on_event("shutdown")
async def shutdown_event():
    app_logger.info("Shutting down application")
    redis_client.close()


@app.get("/")
async def root():
    """Liveness check."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.environment,
    }


@app.get("/health")
async def health_check():
    """Readiness check including the database and cache."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "database": database_status(),
        "redis": redis_status(),
    }
