"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from iam.presentation import administrators_router, register_iam_exception_handlers
from iam.presentation import router as auth_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_platform_engine,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultConnectionProbe, DefaultStartupProbe
from infrastructure.settings import (
    get_auth_settings,
    get_cipher_settings,
    get_cors_settings,
    get_settings,
)
from infrastructure.version import __version__
from tenancy.application.connection_registry import TenantConnectionRegistry
from tenancy.dependencies import build_connection_registry, get_connection_registry
from tenancy.presentation import (
    TenantResolutionMiddleware,
    register_tenancy_exception_handlers,
)
from tenancy.presentation import router as tenants_router


@asynccontextmanager
async def cropco_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - The tenant connection registry (all cached engines closed on shutdown)
    - The platform engine (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()

    if not get_auth_settings().jwt_secret.get_secret_value():
        probe.secret_not_configured("CROPCO_AUTH_JWT_SECRET")
    if not get_cipher_settings().encryption_key.get_secret_value():
        probe.secret_not_configured("CROPCO_TENANT_ENCRYPTION_KEY")

    registry = build_connection_registry()
    app.state.connection_registry = registry
    probe.application_started(version=__version__)

    yield

    probe.application_stopping(cached_tenant_connections=len(registry))
    await registry.evict_all()
    await close_database_connections()


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed input answers 400 like every other bad-input error."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app() -> FastAPI:
    """Build the application with its middleware, routes and error handlers."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant API core: tenant routing, authentication "
        "and authorization",
        version=__version__,
        lifespan=cropco_lifespan,
    )

    app.add_middleware(TenantResolutionMiddleware)
    cors = get_cors_settings()
    if cors.is_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors.origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_tenancy_exception_handlers(app)
    register_iam_exception_handlers(app)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(auth_router)
    app.include_router(administrators_router)
    app.include_router(tenants_router)

    @app.get("/health")
    def health(
        registry: Annotated[TenantConnectionRegistry, Depends(get_connection_registry)],
    ) -> dict:
        """Basic health check endpoint."""
        return {
            "status": "ok",
            "version": __version__,
            "cached_tenant_connections": len(registry),
        }

    @app.get("/health/db")
    async def health_db(
        engine: Annotated[AsyncEngine, Depends(get_platform_engine)],
    ):
        """Check platform database connection health."""
        try:
            async with engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            DefaultConnectionProbe().health_check_failed(e)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "connected": False},
            )
        return {"status": "ok", "connected": True}

    return app


app = create_app()
