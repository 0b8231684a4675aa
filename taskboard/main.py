"""Taskboard Backend - FastAPI Application."""

import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from .config import get_settings
from .db.database import engine, get_pool_status
from .db.models import Base
from .api.v1 import router as v1_router
from .core.logging import (
    setup_logging,
    get_logger,
    set_request_id,
    clear_context,
    log_event,
    LogEvent,
)

settings = get_settings()

# Setup structured logging
setup_logging(
    log_level=settings.log_level,
    service_name="taskboard-api",
    environment=settings.environment,
    json_output=settings.log_json,
    log_file=settings.log_file,
)

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all HTTP requests with structured logging."""

    async def dispatch(self, request: Request, call_next):
        # Set request ID from header or generate new one
        request_id = set_request_id(request.headers.get("X-Request-ID"))
        start_time = time.time()
        client_ip = request.client.host if request.client else None

        try:
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000

            # Skip health check to reduce noise
            if request.url.path != "/health":
                logger.info(
                    f"{request.method} {request.url.path} - {response.status_code}",
                    extra={
                        "http_method": request.method,
                        "http_path": request.url.path,
                        "http_query": str(request.url.query),
                        "http_status": response.status_code,
                        "http_duration_ms": round(duration_ms, 2),
                        "client_ip": client_ip,
                    },
                )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"{request.method} {request.url.path} - Error: {str(e)}",
                exc_info=True,
                extra={
                    "http_method": request.method,
                    "http_path": request.url.path,
                    "http_duration_ms": round(duration_ms, 2),
                    "client_ip": client_ip,
                    "error": str(e),
                },
            )
            raise
        finally:
            clear_context()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    log_event(
        LogEvent.SYSTEM_STARTUP,
        f"Taskboard API starting up (version {settings.app_version})",
        environment=settings.environment,
    )
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")
    yield
    log_event(
        LogEvent.SYSTEM_SHUTDOWN,
        "Taskboard API shutting down",
    )


app = FastAPI(
    title=settings.app_name,
    description="Task list queries with filtering, sorting and cached counts",
    version=settings.app_version,
    docs_url="/docs" if not settings.is_production() else None,
    redoc_url="/redoc" if not settings.is_production() else None,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Request-ID"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

app.include_router(v1_router, prefix="/api/v1")


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "tasks": "/api/v1/tasks",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint with pool status for monitoring."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.app_version,
        "database_pool": get_pool_status(),
    }
