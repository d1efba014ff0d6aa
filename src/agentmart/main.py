"""AgentMart API - Main FastAPI application."""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse, Response
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from agentmart.backend import BackendClient
from agentmart.config import settings
from agentmart.exceptions import (
    AccessDeniedError,
    AdminAccessDeniedError,
    AgentDownloadError,
    AgentFileMissingError,
    AgentUploadError,
    BackendConnectionError,
    BackendError,
    BackendNotFoundError,
    BackendPermissionError,
    InvalidPurchaseTransitionError,
    PaymentDeclinedError,
    RecordNotFoundError,
    ValidationError,
)
from agentmart.middleware.auth import AuthMiddleware
from agentmart.middleware.rate_limit import limiter
from agentmart.observability import SentryConfig, configure_logging, init_sentry
from agentmart.payments import PaymentGateway, SimulatedPaymentGateway
from agentmart.redis_client import RedisClient, get_redis_client
from agentmart.routes import api_router, health
from agentmart.session import SessionResolver

logger = structlog.get_logger()

HOME_PATH = "/"

# Expected failures and the status each one is reported with
ERROR_STATUS: dict[type[Exception], int] = {
    ValidationError: 400,
    AgentUploadError: 400,
    PaymentDeclinedError: 402,
    RecordNotFoundError: 404,
    AgentFileMissingError: 404,
    InvalidPurchaseTransitionError: 409,
    AgentDownloadError: 502,
    BackendError: 502,
    BackendPermissionError: 403,
    BackendNotFoundError: 404,
    BackendConnectionError: 503,
}


def _status_for(exc: Exception) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


async def _expected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = _status_for(exc)
    detail = exc.message if isinstance(exc, BackendError) else str(exc)
    logger.info(
        "Request failed",
        path=request.url.path,
        status_code=status_code,
        error=type(exc).__name__,
    )
    return JSONResponse(status_code=status_code, content={"detail": detail})


async def _access_denied_handler(request: Request, exc: Exception) -> Response:
    """Admin pages send browsers home; other denials are plain 401/403 bodies."""
    if isinstance(exc, AdminAccessDeniedError):
        if "text/html" in request.headers.get("accept", ""):
            return RedirectResponse(HOME_PATH, status_code=303)
        return JSONResponse(
            status_code=403,
            content={"detail": exc.message, "redirect_to": HOME_PATH},
        )
    status_code = exc.status_code if isinstance(exc, AccessDeniedError) else 403
    message = exc.message if isinstance(exc, AccessDeniedError) else "Access denied"
    return JSONResponse(status_code=status_code, content={"detail": message})


async def _http_exception_handler(request: Request, exc: Exception) -> Response:
    if isinstance(exc, StarletteHTTPException) and exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail or "Not Found", "path": request.url.path},
        )
    status_code = exc.status_code if isinstance(exc, StarletteHTTPException) else 500
    detail = exc.detail if isinstance(exc, StarletteHTTPException) else "Error"
    headers = getattr(exc, "headers", None)
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and return a generic body without internal details."""
    error_id = str(uuid.uuid4())[:8]
    logger.exception(
        "Unhandled exception",
        error_id=error_id,
        path=str(request.url.path),
        method=request.method,
        exc_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An internal error occurred. Please try again later.",
            "error_id": error_id,
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the backend client and Redis unless they were injected."""
    logger.info("Starting AgentMart API", version=settings.VERSION)

    owned_backend = None
    if getattr(app.state, "backend", None) is None:
        owned_backend = BackendClient(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY,
            timeout=settings.BACKEND_TIMEOUT_SECONDS,
        )
        app.state.backend = owned_backend
        app.state.session_resolver = SessionResolver(owned_backend, settings.admin_emails)

    owned_redis: RedisClient | None = None
    if getattr(app.state, "redis", None) is None:
        owned_redis = get_redis_client(settings.REDIS_URL)
        await owned_redis.connect()
        app.state.redis = owned_redis

    yield

    if owned_redis is not None:
        await owned_redis.disconnect()
    if owned_backend is not None:
        await owned_backend.aclose()
    logger.info("AgentMart API stopped")


def create_app(
    backend: BackendClient | None = None,
    redis: RedisClient | None = None,
    payment_gateway: PaymentGateway | None = None,
    session_resolver: SessionResolver | None = None,
) -> FastAPI:
    """Build the application. Collaborators left as None are created at startup."""
    app = FastAPI(
        title="AgentMart API",
        description="Marketplace for AI agent JSON configurations",
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.state.backend = backend
    app.state.redis = redis
    app.state.payment_gateway = payment_gateway or SimulatedPaymentGateway(
        settings.PAYMENT_SIMULATION_DELAY_SECONDS
    )
    if session_resolver is None and backend is not None:
        session_resolver = SessionResolver(backend, settings.admin_emails)
    app.state.session_resolver = session_resolver

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AccessDeniedError, _access_denied_handler)
    for exc_class in ERROR_STATUS:
        app.add_exception_handler(exc_class, _expected_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _global_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=600,
    )
    app.add_middleware(AuthMiddleware)

    app.include_router(health.router)
    app.include_router(api_router)
    return app


def build_app() -> FastAPI:
    """Entry point for ASGI servers: logging and Sentry, then the app."""
    init_sentry(
        "agentmart-api",
        SentryConfig(
            service_name="agentmart-api",
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            release=f"agentmart-api@{settings.VERSION}",
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        ),
    )
    configure_logging("agentmart-api", settings.LOG_LEVEL)
    return create_app()
