"""
FastAPI application entry point.

Uses structured logging from core.logging module.
"""

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.db import db
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import issues as issues_router

# Configure structured logging
settings = get_settings()
configure_logging(level="DEBUG" if settings.debug else "INFO")
logger = get_logger("api")


def create_app() -> FastAPI:
    # API is accessible at /api/v1/*
    api_prefix = f"{settings.api_prefix}/v1"

    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # Added last so it runs first: request logging sees the bound request id
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info("app_startup", app_name=settings.app_name)

        db.initialize(settings.database_url)
        health = db.health_check()
        if not health["healthy"]:
            logger.error("database_unreachable", error=health["error"])
            raise RuntimeError("Database unreachable. Check DATABASE_URL configuration.")
        logger.info("database_initialized", latency_ms=health["latency_ms"])

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("app_shutdown")
        db.reset()

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """
        Readiness probe.

        Returns 200 when the database answers, 503 otherwise.
        """
        database = db.health_check()
        checks = {"database": database["healthy"]}
        if not database["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )
        return {"status": "ready", "checks": checks}

    app.include_router(issues_router.router, prefix=api_prefix)

    return app


app = create_app()
