"""Application-scoped IAM components built from settings.

Resolvers, the checkpoint and the login service hold no per-request state,
so one instance of each is reused across requests.
"""

from functools import lru_cache

from iam.application.authorization import AuthorizationCheckpoint
from iam.application.login_service import LoginService
from iam.application.resolvers import (
    PlatformAdministratorResolver,
    TenantAdministratorResolver,
    TenantUserResolver,
)
from iam.infrastructure.administrator_repository import (
    AdministratorRepository,
    administrator_repository_opener,
)
from iam.infrastructure.tenant_user_repository import tenant_user_repository_opener
from infrastructure.database.dependencies import get_platform_sessionmaker
from infrastructure.dependencies import get_token_service


def _platform_administrators():
    return administrator_repository_opener(
        get_platform_sessionmaker, AdministratorRepository.platform
    )


def _tenant_administrators():
    return administrator_repository_opener(
        get_platform_sessionmaker, AdministratorRepository.tenant_management
    )


@lru_cache
def get_tenant_user_resolver() -> TenantUserResolver:
    """Get the resolver of the user-token cookie channel."""
    return TenantUserResolver(
        token_service=get_token_service(),
        open_repository=tenant_user_repository_opener(),
    )


@lru_cache
def get_platform_administrator_resolver() -> PlatformAdministratorResolver:
    """Get the resolver of the administrator-token cookie channel."""
    return PlatformAdministratorResolver(
        token_service=get_token_service(),
        open_repository=_platform_administrators(),
    )


@lru_cache
def get_tenant_administrator_resolver() -> TenantAdministratorResolver:
    """Get the resolver of the x-tenant-token header channel."""
    return TenantAdministratorResolver(
        token_service=get_token_service(),
        open_repository=_tenant_administrators(),
    )


@lru_cache
def get_authorization_checkpoint() -> AuthorizationCheckpoint:
    return AuthorizationCheckpoint()


@lru_cache
def get_login_service() -> LoginService:
    """Get the login service shared by every channel."""
    return LoginService(
        token_service=get_token_service(),
        open_user_repository=tenant_user_repository_opener(),
        open_administrator_repository=_platform_administrators(),
        open_tenant_administrator_repository=_tenant_administrators(),
    )
