"""API Gateway - FastAPI application exposing users, sleep logs and stats."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sleep_tracker.api.dependencies import ServiceManager, get_service
from sleep_tracker.api.routes import sleep_logs, users
from sleep_tracker.api.schemas import ErrorResponse, PingResponse
from sleep_tracker.api.service import SleepTrackerService
from sleep_tracker.common.config import Config, get_config
from sleep_tracker.common.constants import APIConstants
from sleep_tracker.common.exceptions import (
    ConstraintViolationError,
    DuplicateKeyError,
    ReferentialIntegrityError,
    SleepTrackerException,
    StorageError,
    ValidationError,
)
from sleep_tracker.common.logging import configure_logging


config = get_config()
configure_logging(config.log_level.value)
logger = logging.getLogger("sleep_tracker_api")


# Most specific first; the first isinstance match wins
ERROR_STATUS_CODES = (
    (DuplicateKeyError, 409),
    (ReferentialIntegrityError, 404),
    (ConstraintViolationError, 400),
    (StorageError, 500),
    (ValidationError, 400),
)


def status_code_for(exc: SleepTrackerException) -> int:
    for error_cls, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_cls):
            return status_code
    return 500


# =============================================================================
# CORS CONFIGURATION
# =============================================================================

def get_cors_origins(config: Config) -> List[str]:
    """Get allowed CORS origins.

    In production, set SLEEP_TRACKER_CORS_ORIGINS to a comma-separated
    list of allowed origins.
    """
    if config.cors_origins:
        return config.cors_origins

    if config.is_production:
        logger.warning(
            "SLEEP_TRACKER_CORS_ORIGINS not set in production. "
            "CORS will be disabled."
        )
        return []

    logger.warning("Running in development mode with permissive CORS (allow_origins=['*'])")
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Sleep tracker API starting up...")
    get_service()
    logger.info("Sleep tracker API ready")

    yield

    logger.info("Sleep tracker API shutting down...")
    ServiceManager.shutdown()
    logger.info("Sleep tracker API shutdown complete")


app = FastAPI(
    title="Sleep Tracker API",
    description="Per-user sleep logs and rolling sleep statistics.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if config.enable_docs else None,
    redoc_url="/redoc" if config.enable_docs else None,
)

cors_origins = get_cors_origins(config)
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", APIConstants.REQUEST_ID_HEADER],
        expose_headers=[APIConstants.TOTAL_COUNT_HEADER, APIConstants.REQUEST_ID_HEADER],
    )

app.include_router(users.router)
app.include_router(sleep_logs.router)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(SleepTrackerException)
async def sleep_tracker_error_handler(
    request: Request, exc: SleepTrackerException
) -> JSONResponse:
    """Map the error taxonomy onto HTTP statuses."""
    request_id = getattr(request.state, "request_id", None)
    status_code = status_code_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request rejected",
        extra={"request_id": request_id, "error": exc.code, "status_code": status_code},
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.code.lower(),
            message=exc.message,
            request_id=request_id,
            details=exc.details,
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors (mostly 404 for absent records) as ErrorResponse."""
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error="not_found" if exc.status_code == 404 else "http_error",
            message=str(exc.detail),
            request_id=request_id,
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors.

    Logs full exception for debugging but returns sanitized message to client.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.exception(
        "Unexpected error",
        extra={"request_id": request_id, "error_type": type(exc).__name__}
    )
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="internal_error",
            message="An unexpected error occurred",
            request_id=request_id,
        ).model_dump(),
    )


# =============================================================================
# MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to each request for tracing."""
    request_id = f"req_{uuid4().hex[:12]}"
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers[APIConstants.REQUEST_ID_HEADER] = request_id
    return response


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get(f"{APIConstants.PREFIX}/ping", response_model=PingResponse)
def ping(service: SleepTrackerService = Depends(get_service)) -> PingResponse:
    """Round-trip check that reports the server's current date."""
    return PingResponse(date=service.today().isoformat())


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "service": APIConstants.SERVICE_NAME}


@app.get("/ready")
async def readiness_check() -> dict:
    """Readiness check endpoint.

    Returns 503 until the service singleton is initialized.
    """
    if not ServiceManager._initialized:
        raise HTTPException(status_code=503, detail="not_ready")
    return {"status": "ready", "service": APIConstants.SERVICE_NAME}


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sleep_tracker.api.gateway:app",
        host=config.api_host,
        port=config.api_port,
        reload=config.is_development,
        log_level=config.log_level.value.lower(),
    )
