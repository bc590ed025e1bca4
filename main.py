import os
import sys
from typing import Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.logging_config import logger
from core.audit import AuditRecorder, AuditSink, InMemoryAuditSink, build_default_sinks
from core.middleware import AuditMiddleware, AuthenticationMiddleware

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.auth import router as auth_router
from routers.leads import router as leads_router
from routers.csv_transfer import router as csv_transfer_router
from routers.audit import router as audit_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app(audit_sinks: Optional[Iterable[AuditSink]] = None) -> FastAPI:
    """
    Build the API.

    audit_sinks replaces the default audit destinations
    (logger + in-memory buffer, plus Supabase when enabled).
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Pipeline CRM API: role-based access, audit trail and CSV import/export",
    )

    # -------------------------------------------------
    # Audit trail
    # -------------------------------------------------
    sinks = list(audit_sinks) if audit_sinks is not None else build_default_sinks(settings)
    app.state.audit_recorder = AuditRecorder(sinks)
    app.state.audit_buffer = next(
        (sink for sink in sinks if isinstance(sink, InMemoryAuditSink)), None
    )

    # -------------------------------------------------
    # Pipeline (last added runs first):
    #   CORS → authenticate → audit → routes
    # -------------------------------------------------
    if settings.AUDIT_ENABLED:
        app.add_middleware(
            AuditMiddleware,
            recorder=app.state.audit_recorder,
            exempt_paths=settings.AUDIT_EXEMPT_PATHS,
        )
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
        validate_config_on_startup()

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(auth_router)
    app.include_router(leads_router)
    app.include_router(csv_transfer_router)
    app.include_router(audit_router)
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
