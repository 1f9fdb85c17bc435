"""Maps tenancy errors to HTTP responses.

Operator-level failures (unset encryption key, undecryptable stored
password) answer with a fixed message; their cause is only logged.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from infrastructure.database.exceptions import DatabaseConnectionError
from shared_kernel.exceptions import ConfigurationError
from shared_kernel.middleware import TenantContextMissingError
from tenancy.ports.exceptions import (
    CredentialIntegrityError,
    DuplicateTenantError,
    InvalidTenantDatabaseConfigError,
    TenantDisabledError,
    TenantNotFoundError,
)

SERVER_MISCONFIGURED = "The server is not configured correctly"
DATABASE_UNAVAILABLE = "The tenant database is not available, try again later"


def _detail(status_code: int, message: str | None = None):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={"detail": message or str(exc)},
        )

    return handler


def register_tenancy_exception_handlers(app: FastAPI) -> None:
    """Register handlers for tenant resolution and administration errors."""
    app.add_exception_handler(
        TenantNotFoundError, _detail(status.HTTP_404_NOT_FOUND)
    )
    app.add_exception_handler(
        TenantDisabledError, _detail(status.HTTP_403_FORBIDDEN)
    )
    app.add_exception_handler(
        DuplicateTenantError, _detail(status.HTTP_409_CONFLICT)
    )
    app.add_exception_handler(
        InvalidTenantDatabaseConfigError, _detail(status.HTTP_400_BAD_REQUEST)
    )
    app.add_exception_handler(
        TenantContextMissingError, _detail(status.HTTP_400_BAD_REQUEST)
    )
    app.add_exception_handler(
        DatabaseConnectionError,
        _detail(status.HTTP_503_SERVICE_UNAVAILABLE, DATABASE_UNAVAILABLE),
    )
    app.add_exception_handler(
        CredentialIntegrityError,
        _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_MISCONFIGURED),
    )
    app.add_exception_handler(
        ConfigurationError,
        _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_MISCONFIGURED),
    )
