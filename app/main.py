"""ASGI entry point for the homestay booking API."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.api.v1.router import api_router
from app.config import settings
from app.core.exceptions import AppException, TransientStoreError
from app.core.logging_config import setup_logging
from app.core.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from app.database import close_db, engine, init_db

setup_logging()
logger = logging.getLogger(__name__)

# asyncpg surfaces refused or dropped connections as bare OSError subclasses
STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    if settings.debug:
        await init_db()
    logger.info(
        "%s %s ready on %s (%s database)",
        settings.app_name,
        settings.app_version,
        settings.environment,
        engine.dialect.name,
    )
    yield
    await close_db()
    logger.info("Database engine disposed")


def _error_response(exc: AppException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Render domain errors and store outages as structured JSON bodies."""

    @app.exception_handler(AppException)
    async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
        return _error_response(exc)

    async def handle_store_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Store unavailable on %s %s: %s: %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc,
        )
        return _error_response(TransientStoreError())

    for exc_class in STORE_ERRORS:
        app.add_exception_handler(exc_class, handle_store_error)


def install_middleware(app: FastAPI) -> None:
    """Add middleware; the last one added wraps the others."""
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    # Redis is not assumed in local runs or the test-suite
    if settings.environment not in ("development", "test"):
        app.add_middleware(RateLimitMiddleware, requests_per_minute=settings.rate_limit_per_minute)
    app.add_middleware(SecurityHeadersMiddleware)


def create_application() -> FastAPI:
    """Build the API application."""
    docs_enabled = settings.debug
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Homestay listings, availability, bookings and reviews",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    install_middleware(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict:
        """Liveness plus a round trip to the database."""
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": engine.dialect.name,
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @app.get("/", tags=["System"])
    async def root() -> dict:
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "api": settings.api_prefix,
            "docs": "/docs" if docs_enabled else None,
        }

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
    )
