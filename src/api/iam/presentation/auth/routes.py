"""HTTP routes for login, session checks and logout on every channel.

Cookie channels (`user-token`, `administrator-token`) receive their token
as an HttpOnly cookie; the tenant-management channel receives it in the
body and sends it back in the `x-tenant-token` header.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from iam.application.login_service import LoginService
from iam.dependencies.authentication import get_login_service
from iam.dependencies.principal import (
    require_administrator,
    require_tenant_administrator,
    require_user,
)
from iam.domain.channels import CredentialChannel
from iam.presentation.auth.models import (
    AdministratorSessionResponse,
    LoginRequest,
    LogoutResponse,
    UserSessionResponse,
)
from infrastructure.dependencies import get_request_context, get_token_service
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import TokenService
from shared_kernel.middleware import RequestContext

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


def _set_token_cookie(
    response: Response, channel: CredentialChannel, token: str
) -> None:
    settings = get_auth_settings()
    response.set_cookie(
        key=channel.value,
        value=token,
        max_age=settings.token_ttl_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        path="/",
    )


def _clear_token_cookie(response: Response, channel: CredentialChannel) -> None:
    settings = get_auth_settings()
    response.delete_cookie(
        key=channel.value,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        path="/",
    )


@router.post("/login")
async def login_user(
    request: LoginRequest,
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[LoginService, Depends(get_login_service)],
) -> UserSessionResponse:
    """Log a tenant user in against the tenant named by `x-tenant-id`.

    Returns the user with its grants and sets the `user-token` cookie.
    """
    result = await service.login_user(request.email, request.password, context)
    _set_token_cookie(response, CredentialChannel.TENANT_USER, result.token)
    return UserSessionResponse.from_domain(result.principal)


@router.get("/check-status")
async def check_user_status(
    response: Response,
    context: Annotated[RequestContext, Depends(require_user(skip_path_validation=True))],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> UserSessionResponse:
    """Return the current user and refresh its cookie."""
    user = context.principal
    _set_token_cookie(
        response, CredentialChannel.TENANT_USER, token_service.issue(user.id)
    )
    return UserSessionResponse.from_domain(user)


@router.post("/logout")
async def logout_user(response: Response) -> LogoutResponse:
    _clear_token_cookie(response, CredentialChannel.TENANT_USER)
    return LogoutResponse()


@router.post("/administrator/login")
async def login_administrator(
    request: LoginRequest,
    response: Response,
    service: Annotated[LoginService, Depends(get_login_service)],
) -> AdministratorSessionResponse:
    """Log a platform administrator in and set the `administrator-token` cookie."""
    result = await service.login_administrator(request.email, request.password)
    _set_token_cookie(
        response, CredentialChannel.PLATFORM_ADMINISTRATOR, result.token
    )
    return AdministratorSessionResponse.from_domain(result.principal)


@router.get("/administrator/check-status")
async def check_administrator_status(
    response: Response,
    context: Annotated[RequestContext, Depends(require_administrator())],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AdministratorSessionResponse:
    administrator = context.principal
    _set_token_cookie(
        response,
        CredentialChannel.PLATFORM_ADMINISTRATOR,
        token_service.issue(administrator.id),
    )
    return AdministratorSessionResponse.from_domain(administrator)


@router.post("/administrator/logout")
async def logout_administrator(response: Response) -> LogoutResponse:
    _clear_token_cookie(response, CredentialChannel.PLATFORM_ADMINISTRATOR)
    return LogoutResponse()


@router.post("/tenant-management/login")
async def login_tenant_administrator(
    request: LoginRequest,
    service: Annotated[LoginService, Depends(get_login_service)],
) -> AdministratorSessionResponse:
    """Log a tenant administrator in. The token is returned in the body."""
    result = await service.login_tenant_administrator(
        request.email, request.password
    )
    return AdministratorSessionResponse.from_domain(
        result.principal, token=result.token
    )


@router.get("/tenant-management/check-status")
async def check_tenant_administrator_status(
    context: Annotated[RequestContext, Depends(require_tenant_administrator())],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AdministratorSessionResponse:
    administrator = context.principal
    return AdministratorSessionResponse.from_domain(
        administrator, token=token_service.issue(administrator.id)
    )
