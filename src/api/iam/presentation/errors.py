"""Maps IAM and token errors to HTTP responses.

Authentication failures share status 401 and carry only their fixed,
non-leaking message.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from iam.ports.exceptions import (
    AdministratorNotFoundError,
    AuthenticationError,
    DuplicateAdministratorError,
    IncorrectPasswordError,
    InsufficientPermissionsError,
    PermissionDeniedError,
    ProtectedAdministratorActionForbiddenError,
    ProtectedAdministratorError,
)
from shared_kernel.auth import TokenVerificationError


def _detail(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def register_iam_exception_handlers(app: FastAPI) -> None:
    """Register handlers for authentication, authorization and account errors."""
    unauthorized = _detail(status.HTTP_401_UNAUTHORIZED)
    forbidden = _detail(status.HTTP_403_FORBIDDEN)
    bad_request = _detail(status.HTTP_400_BAD_REQUEST)

    app.add_exception_handler(AuthenticationError, unauthorized)
    app.add_exception_handler(TokenVerificationError, unauthorized)
    app.add_exception_handler(PermissionDeniedError, forbidden)
    app.add_exception_handler(InsufficientPermissionsError, forbidden)

    app.add_exception_handler(
        AdministratorNotFoundError, _detail(status.HTTP_404_NOT_FOUND)
    )
    app.add_exception_handler(
        DuplicateAdministratorError, _detail(status.HTTP_409_CONFLICT)
    )
    app.add_exception_handler(ProtectedAdministratorError, bad_request)
    app.add_exception_handler(ProtectedAdministratorActionForbiddenError, forbidden)
    app.add_exception_handler(IncorrectPasswordError, bad_request)
