from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from saas_platform.core.errors import DomainError, ErrorCode
from saas_platform.core.logging import configure_logging, correlation_id_var, tenant_id_var
from saas_platform.core.settings import get_app_settings
from saas_platform.db.run_migrations import main as run_alembic
from saas_platform.db.seed import seed_all
from saas_platform.db.session import get_async_session
from saas_platform.schemas.common import ErrorResponse, HealthResponse

# Routers
from saas_platform.api.routes.auth import router as auth_router
from saas_platform.api.routes.customers import router as customers_router
from saas_platform.api.routes.tenants import router as tenants_router
from saas_platform.api.routes.user_roles import router as user_roles_router
from saas_platform.api.routes.users import router as users_router

settings = get_app_settings()

# Configure structured logging once at import
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness and readiness probes."},
    {"name": "Auth", "description": "Authentication and token endpoints."},
    {"name": "Tenants", "description": "Tenant administration."},
    {"name": "Customers", "description": "Customers of the current tenant."},
    {"name": "Users", "description": "Users of the current tenant."},
    {"name": "User Roles", "description": "Role assignments of users."},
]

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    openapi_tags=openapi_tags,
)

# CORS - avoid wildcard with credentials
cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
    logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
    cors_allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=cors_allow_credentials,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """
    Enrich request context with correlation_id and tenant_id for logging and error responses.
    Adds 'X-Correlation-ID' to every response.
    """
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    tenant = request.headers.get("X-Tenant-ID")
    token_corr = correlation_id_var.set(corr)
    token_tenant = tenant_id_var.set(tenant)
    request.state.correlation_id = corr
    request.state.tenant_id = tenant

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = corr
        logger.info("Completed %s %s -> %s", request.method, request.url.path, response.status_code)
        return response
    finally:
        correlation_id_var.reset(token_corr)
        tenant_id_var.reset(token_tenant)


def _build_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    errors: Optional[List[str]] = None,
    details: Any = None,
) -> JSONResponse:
    """Build a standardized ErrorResponse JSONResponse."""
    err = ErrorResponse(
        message=message,
        errors=errors or [message],
        status=status_code,
        error_type=error_type,
        details=details,
        correlation_id=getattr(request.state, "correlation_id", None),
        tenant_id=getattr(request.state, "tenant_id", None),
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json", by_alias=True))


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Translate service-layer failures (not found, conflict, ...) to their HTTP status."""
    if exc.status_code >= 500:
        logger.error("Domain error: %s", exc.message)
    else:
        logger.info("Request rejected (%s): %s", exc.code.value, exc.message)
    return _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type=exc.code.value,
        message=exc.message,
        errors=exc.errors or None,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Global handler for HTTPException to produce a standardized error envelope.
    """
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    response = _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type=ErrorCode.HTTP_ERROR.value,
        message=str(detail),
        details=None if isinstance(exc.detail, str) else exc.detail,
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def _jsonable_errors(errors: List[dict]) -> List[dict]:
    # ctx may hold exception instances that are not JSON serializable
    return [{k: (str(v) if k == "ctx" else v) for k, v in err.items() if k != "input"} for err in errors]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Global handler for request validation errors with a standard structure.
    """
    errors = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return _build_error_response(
        request=request,
        status_code=422,
        error_type=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        errors=errors,
        details=_jsonable_errors(exc.errors()),
    )


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    """A unique or foreign-key constraint rejected the write."""
    logger.warning("Integrity violation: %s", exc.orig)
    return _build_error_response(
        request=request,
        status_code=409,
        error_type=ErrorCode.CONFLICT.value,
        message="The request conflicts with existing data",
    )


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def store_unavailable_handler(request: Request, exc: Exception):
    """The database could not be reached after retries."""
    logger.error("Database unavailable: %s", exc)
    return _build_error_response(
        request=request,
        status_code=503,
        error_type=ErrorCode.STORE_UNAVAILABLE.value,
        message="The data store is temporarily unavailable",
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces and to return a structured error.
    """
    logger.exception("Unhandled error processing request")
    return _build_error_response(
        request=request,
        status_code=500,
        error_type=ErrorCode.INTERNAL_ERROR.value,
        message="An unexpected error occurred",
    )


@app.on_event("startup")
async def on_startup() -> None:
    """
    Run migrations and optional seeding on service startup.

    This ensures the database schema is up to date. Seeding is opt-in via settings.
    """
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        try:
            logger.info("Running Alembic migrations: upgrade head")
            # env.py drives its own event loop, so run it off the server loop.
            await asyncio.to_thread(run_alembic, ["upgrade", "head"])
            logger.info("Migrations completed.")
        except Exception as exc:
            # Keep serving; readiness is reported by /health.
            logger.exception("Migration step failed: %s", exc)

    if settings.AUTO_SEED:
        try:
            logger.info("Running database seeding...")
            await seed_all()
            logger.info("Seeding completed.")
        except Exception as exc:
            logger.exception("Seeding step failed: %s", exc)


# Build API v1 router and include sub-routers
api_v1 = APIRouter(prefix="/api/v1")


# PUBLIC_INTERFACE
@api_v1.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Liveness probe that also reports whether the database answers a trivial query.",
    tags=["Health"],
)
async def health_check(session: AsyncSession = Depends(get_async_session)) -> HealthResponse:
    """
    Liveness/readiness probe. An unreachable database surfaces as 503
    store_unavailable once connection retries are exhausted.
    """
    await session.execute(text("SELECT 1"))
    return HealthResponse(status="ok", database=True)


api_v1.include_router(auth_router)
api_v1.include_router(tenants_router)
api_v1.include_router(customers_router)
api_v1.include_router(users_router)
api_v1.include_router(user_roles_router)

# Attach api_v1 to app
app.include_router(api_v1)
