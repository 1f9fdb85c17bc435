"""FastAPI dependencies that authenticate and authorize the caller.

Each factory returns a dependency yielding the request context extended
with the resolved principal. Routes declare what they need:

    @router.get("/crops/all")
    async def list_crops(
        context: Annotated[RequestContext, Depends(require_user())],
    ): ...

Handlers then use `context.require_tenant_connection()` for tenant data
and `context.principal` for audit and ownership.
"""

from typing import Annotated

from fastapi import Cookie, Depends, Header, Request

from iam.application.authorization import AuthorizationCheckpoint
from iam.application.resolvers import (
    PlatformAdministratorResolver,
    TenantAdministratorResolver,
    TenantUserResolver,
)
from iam.dependencies.authentication import (
    get_authorization_checkpoint,
    get_platform_administrator_resolver,
    get_tenant_administrator_resolver,
    get_tenant_user_resolver,
)
from iam.domain.channels import CredentialChannel
from infrastructure.dependencies import get_request_context
from shared_kernel.middleware import RequestContext


def route_path(request: Request) -> str:
    """Path template of the matched route (`/crops/one/{id}`), not the URL."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def require_user(skip_path_validation: bool = False):
    """Require a tenant user holding a permit for the invoked route.

    Args:
        skip_path_validation: Only require authentication (e.g. "who am I").
    """

    async def dependency(
        request: Request,
        context: Annotated[RequestContext, Depends(get_request_context)],
        resolver: Annotated[TenantUserResolver, Depends(get_tenant_user_resolver)],
        checkpoint: Annotated[
            AuthorizationCheckpoint, Depends(get_authorization_checkpoint)
        ],
        token: Annotated[
            str | None, Cookie(alias=CredentialChannel.TENANT_USER.value)
        ] = None,
    ) -> RequestContext:
        user = await resolver.resolve(token, context)
        checkpoint.authorize(
            user,
            route_path(request),
            skip_path_validation=skip_path_validation,
        )
        return context.with_principal(user)

    return dependency


def require_administrator():
    """Require an authenticated platform administrator."""

    async def dependency(
        context: Annotated[RequestContext, Depends(get_request_context)],
        resolver: Annotated[
            PlatformAdministratorResolver,
            Depends(get_platform_administrator_resolver),
        ],
        token: Annotated[
            str | None, Cookie(alias=CredentialChannel.PLATFORM_ADMINISTRATOR.value)
        ] = None,
    ) -> RequestContext:
        administrator = await resolver.resolve(token, context)
        return context.with_principal(administrator)

    return dependency


def require_tenant_administrator():
    """Require an authenticated tenant administrator (x-tenant-token header)."""

    async def dependency(
        context: Annotated[RequestContext, Depends(get_request_context)],
        resolver: Annotated[
            TenantAdministratorResolver,
            Depends(get_tenant_administrator_resolver),
        ],
        token: Annotated[
            str | None, Header(alias=CredentialChannel.TENANT_ADMINISTRATOR.value)
        ] = None,
    ) -> RequestContext:
        administrator = await resolver.resolve(token, context)
        return context.with_principal(administrator)

    return dependency
