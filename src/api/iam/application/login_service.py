"""Login for the three credential channels.

A login checks an email/password pair against the principal store of the
channel and issues a signed token whose subject is the principal id. The
caller decides how the token travels (cookie or response body).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from iam.application.observability import DefaultLoginProbe
from iam.application.security import verify_password
from iam.domain.channels import CredentialChannel
from iam.domain.principals import (
    Administrator,
    PlatformAdministrator,
    TenantAdministrator,
    TenantUser,
)
from iam.ports.exceptions import (
    InsufficientPermissionsError,
    InvalidCredentialsError,
    PrincipalInactiveError,
)
from shared_kernel.observability_context import ObservationContext

if TYPE_CHECKING:
    from iam.application.observability import LoginProbe
    from iam.application.resolvers import (
        AdministratorRepositoryOpener,
        TenantUserRepositoryOpener,
    )
    from shared_kernel.auth import TokenService
    from shared_kernel.middleware import RequestContext


P = TypeVar("P", TenantUser, PlatformAdministrator, TenantAdministrator)


@dataclass(frozen=True)
class LoginResult(Generic[P]):
    """An authenticated principal and the token issued for it."""

    principal: P
    token: str


class LoginService:
    """Authenticates principals by password and issues their tokens."""

    def __init__(
        self,
        token_service: TokenService,
        open_user_repository: TenantUserRepositoryOpener,
        open_administrator_repository: AdministratorRepositoryOpener,
        open_tenant_administrator_repository: AdministratorRepositoryOpener,
        probe: LoginProbe | None = None,
    ):
        self._token_service = token_service
        self._open_user_repository = open_user_repository
        self._open_administrator_repository = open_administrator_repository
        self._open_tenant_administrator_repository = (
            open_tenant_administrator_repository
        )
        self._probe = probe or DefaultLoginProbe()

    async def login_user(
        self, email: str, password: str, context: RequestContext
    ) -> LoginResult[TenantUser]:
        """Log a tenant user in against the tenant of the request.

        Raises:
            TenantContextMissingError: The request names no tenant.
            InvalidCredentialsError: Unknown email or wrong password.
            PrincipalInactiveError: The user is deactivated.
            InsufficientPermissionsError: The user holds no action at all.
        """
        channel = CredentialChannel.TENANT_USER
        probe = self._probe.with_context(ObservationContext(tenant_id=context.tenant_id))
        engine = context.require_tenant_connection()
        email = email.strip().lower()

        async with self._open_user_repository(engine) as users:
            found = await users.get_by_email(email)
            user, password_hash = found if found is not None else (None, None)
            if not verify_password(password, password_hash) or user is None:
                probe.login_failed(
                    channel=channel.value, email=email, reason="invalid_credentials"
                )
                raise InvalidCredentialsError()
            if not user.is_active:
                probe.login_failed(channel=channel.value, email=email, reason="inactive")
                raise PrincipalInactiveError()
            user = user.with_permissions(await users.list_permission_modules(user.id))

        if not any(module.actions for module in user.modules):
            probe.login_failed(
                channel=channel.value, email=email, reason="insufficient_permissions"
            )
            raise InsufficientPermissionsError(user.first_name or user.email)

        probe.login_succeeded(channel=channel.value, principal_id=user.id)
        return LoginResult(principal=user, token=self._token_service.issue(user.id))

    async def login_administrator(
        self, email: str, password: str
    ) -> LoginResult[PlatformAdministrator]:
        """Log a platform administrator in.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
            PrincipalInactiveError: The administrator is deactivated.
        """
        return await self._login_administrator(
            CredentialChannel.PLATFORM_ADMINISTRATOR,
            self._open_administrator_repository,
            email,
            password,
        )

    async def login_tenant_administrator(
        self, email: str, password: str
    ) -> LoginResult[TenantAdministrator]:
        """Log a tenant administrator in (token travels in `x-tenant-token`)."""
        return await self._login_administrator(
            CredentialChannel.TENANT_ADMINISTRATOR,
            self._open_tenant_administrator_repository,
            email,
            password,
        )

    async def _login_administrator(
        self,
        channel: CredentialChannel,
        open_repository: AdministratorRepositoryOpener,
        email: str,
        password: str,
    ) -> LoginResult:
        email = email.strip().lower()
        async with open_repository() as administrators:
            found = await administrators.get_by_email(email)

        administrator: Administrator | None
        administrator, password_hash = found if found is not None else (None, None)
        if not verify_password(password, password_hash) or administrator is None:
            self._probe.login_failed(
                channel=channel.value, email=email, reason="invalid_credentials"
            )
            raise InvalidCredentialsError()
        if not administrator.is_active:
            self._probe.login_failed(
                channel=channel.value, email=email, reason="inactive"
            )
            raise PrincipalInactiveError()

        self._probe.login_succeeded(channel=channel.value, principal_id=administrator.id)
        return LoginResult(
            principal=administrator,
            token=self._token_service.issue(administrator.id),
        )
