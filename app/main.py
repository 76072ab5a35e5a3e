"""Main FastAPI application."""
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.core.cache import ResultCache, create_redis_client
from app.core.database import engine
from app.core.exceptions import ConfigurationError, OccupancyAPIError, RequestValidationFailed
from app.api import router as api_router
from app.schemas.common import ErrorEnvelope
from app.schemas.tenant import ServiceHealth


# Setup logging
setup_logging(settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Workplace Occupancy API")
    logger.info(f"Environment: {settings.ENVIRONMENT}, debug mode: {settings.DEBUG}")

    if not settings.JWT_SECRET_KEY:
        logger.error("JWT_SECRET_KEY not configured; authenticated routes will fail closed")

    app.state.cache = ResultCache(create_redis_client(settings.REDIS_URL))

    yield

    logger.info("Shutting down Workplace Occupancy API")
    await app.state.cache.close()
    await engine.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-tenant occupancy ingestion and space utilization analytics",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log one line per HTTP request."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    start = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    logger.info(
        "HTTP Request",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


# Include API router
app.include_router(api_router, prefix="/api")


def _error_response(status_code: int, error: str, message=None, details=None) -> JSONResponse:
    envelope = ErrorEnvelope(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(exclude_none=True))


def _field_name(loc) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render payload and parameter errors as 400 with per-field details."""
    details = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    logger.warning(
        f"Validation error: {details}",
        extra={"method": request.method, "path": request.url.path},
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST, "Invalid request data", details=details
    )


@app.exception_handler(RequestValidationFailed)
async def request_validation_failed_handler(request: Request, exc: RequestValidationFailed):
    logger.warning(f"Validation error: {exc.message}")
    return _error_response(exc.status_code, exc.message, details=exc.details or None)


@app.exception_handler(OccupancyAPIError)
async def occupancy_error_handler(request: Request, exc: OccupancyAPIError):
    if exc.status_code >= 500:
        logger.error(
            f"Server error: {exc.message}",
            extra={"method": request.method, "path": request.url.path},
        )
        if isinstance(exc, ConfigurationError):
            message = "Server configuration error"
        elif settings.is_production:
            message = "Internal server error"
        else:
            message = exc.message
        return _error_response(exc.status_code, message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Wrap HTTP errors in the standard envelope; unmatched routes name the method and path."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        logger.warning(
            "Route not found",
            extra={"method": request.method, "path": request.url.path},
        )
        return _error_response(
            exc.status_code,
            "Route not found",
            message=f"The requested endpoint {request.method} {request.url.path} was not found.",
        )
    response = _error_response(exc.status_code, str(exc.detail))
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        f"Unhandled error: {exc}",
        extra={"method": request.method, "path": request.url.path},
    )
    error = "Internal server error" if settings.is_production else f"{type(exc).__name__}: {exc}"
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error)


@app.get("/health", response_model=ServiceHealth)
async def health_check():
    """Health check endpoint."""
    return ServiceHealth(
        status="healthy",
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }
