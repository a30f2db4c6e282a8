import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError

from auditlog.config import Settings, get_settings
from auditlog.database import LogStore
from auditlog.routers import create_logs_router
from auditlog.schemas import HealthResponse

logger = logging.getLogger("auditlog.api")


def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, default=str)


def create_app(settings: Optional[Settings] = None, store: Optional[LogStore] = None) -> FastAPI:
    """Build the API.

    ``store`` defaults to one created from ``settings`` whose pool is opened
    and disposed with the app. A store passed in is opened if needed but is
    left for its owner to close.

    Serve with ``uvicorn auditlog.main:create_app --factory``.
    """
    settings = settings or get_settings()
    owns_store = store is None
    if store is None:
        store = LogStore.from_settings(settings)
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Acquire the store's connection pool on startup, release it on shutdown."""
        store.open(create_tables=settings.create_tables)
        yield
        if owns_store:
            store.close()

    app = FastAPI(
        title="Inventory Audit Log API",
        description="Append-only audit trail for logins, product changes and CSV operations",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    # Rate limiter
    limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        """Set basic security headers for all API responses."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    @app.middleware("http")
    async def structured_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        req_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = req_id

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = req_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            payload = {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status": status_code,
                "duration_ms": duration_ms,
            }
            logger.info(_json(payload))

    app.include_router(create_logs_router(limiter, settings.ingest_rate_limit))

    Instrumentator(registry=CollectorRegistry()).instrument(app).expose(
        app, include_in_schema=False, should_gzip=True,
    )

    @app.get("/health", response_model=HealthResponse)
    def health():
        """Health check endpoint for Docker."""
        try:
            store.ping()
        except SQLAlchemyError:
            logger.exception("Health check could not reach the log store")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=HealthResponse(status="degraded", db="error").model_dump(),
            )
        return HealthResponse(status="healthy", db="ok")

    return app
