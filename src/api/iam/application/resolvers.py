"""Principal resolvers: bearer credential in, authenticated principal out.

Every resolver follows the same steps:

1. Extract: the token comes from the resolver's own channel only.
2. Verify: signature and expiry, with expired and invalid tokens reported
   under different reasons.
3. Load: the principal record named by the token subject. Tenant users are
   loaded through the tenant connection attached to the request context and
   nothing else; administrators through the platform database.
4. Check existence and activity.
5. Enrich: tenant users get their current grants and endpoint set.

Nothing is cached between requests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Callable, ClassVar, Generic, TypeVar

from iam.application.observability import DefaultPrincipalResolutionProbe
from iam.domain.channels import CredentialChannel
from iam.domain.principals import (
    PlatformAdministrator,
    TenantAdministrator,
    TenantUser,
)
from iam.ports.exceptions import (
    AuthenticationError,
    MissingCredentialError,
    PrincipalInactiveError,
    PrincipalNotFoundError,
)
from shared_kernel.auth import ExpiredTokenError, TokenVerificationError
from shared_kernel.observability_context import ObservationContext

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from iam.application.observability import PrincipalResolutionProbe
    from iam.ports.repositories import IAdministratorRepository, ITenantUserRepository
    from shared_kernel.auth import TokenService
    from shared_kernel.middleware import RequestContext


P = TypeVar("P", TenantUser, PlatformAdministrator, TenantAdministrator)

TenantUserRepositoryOpener = Callable[
    ["AsyncEngine"], AbstractAsyncContextManager["ITenantUserRepository"]
]
"""Opens a user repository on one tenant's engine."""

AdministratorRepositoryOpener = Callable[
    [], AbstractAsyncContextManager["IAdministratorRepository"]
]
"""Opens an administrator repository on the platform database."""


class PrincipalResolver(ABC, Generic[P]):
    """Shared resolution flow; subclasses say where principals are loaded."""

    channel: ClassVar[CredentialChannel]

    def __init__(
        self,
        token_service: TokenService,
        probe: PrincipalResolutionProbe | None = None,
    ):
        self._token_service = token_service
        self._probe = probe or DefaultPrincipalResolutionProbe()

    async def resolve(self, token: str | None, context: RequestContext) -> P:
        """Authenticate the bearer of `token` on this resolver's channel.

        Args:
            token: Raw token read from this resolver's channel, if any.
            context: The request context built by tenant resolution.

        Returns:
            The freshly loaded principal.

        Raises:
            AuthenticationError: Missing credential, or missing/inactive principal.
            TokenVerificationError: Expired or invalid token.
        """
        probe = self._probe.with_context(
            ObservationContext(tenant_id=context.tenant_id)
        )

        if not token:
            self._reject(probe, MissingCredentialError(self.channel.value))

        try:
            claims = self._token_service.verify(token)
        except TokenVerificationError as e:
            reason = "expired" if isinstance(e, ExpiredTokenError) else "invalid"
            probe.authentication_failed(channel=self.channel.value, reason=reason)
            raise

        principal = await self._load(claims.subject, context, probe)
        if principal is None:
            self._reject(probe, PrincipalNotFoundError())
        if not principal.is_active:
            self._reject(probe, PrincipalInactiveError())

        probe.principal_resolved(
            channel=self.channel.value,
            principal_id=principal.id,
            permitted_endpoints=len(getattr(principal, "permitted_endpoints", ())),
        )
        return principal

    def _reject(self, probe: PrincipalResolutionProbe, error: AuthenticationError):
        probe.authentication_failed(channel=self.channel.value, reason=error.reason)
        raise error

    @abstractmethod
    async def _load(
        self,
        subject: str,
        context: RequestContext,
        probe: PrincipalResolutionProbe,
    ) -> P | None:
        """Load the principal named by a verified token subject."""
        ...


class TenantUserResolver(PrincipalResolver[TenantUser]):
    """Resolves users from the tenant database of the current request."""

    channel = CredentialChannel.TENANT_USER

    def __init__(
        self,
        token_service: TokenService,
        open_repository: TenantUserRepositoryOpener,
        probe: PrincipalResolutionProbe | None = None,
    ):
        super().__init__(token_service, probe)
        self._open_repository = open_repository

    async def _load(
        self,
        subject: str,
        context: RequestContext,
        probe: PrincipalResolutionProbe,
    ) -> TenantUser | None:
        if not context.has_tenant_connection:
            probe.tenant_connection_unavailable(
                channel=self.channel.value,
                reason=(
                    "no_tenant_header"
                    if context.tenant_failure is None
                    else "tenant_resolution_failed"
                ),
            )
        # Raises instead of falling back to any other connection.
        engine = context.require_tenant_connection()

        async with self._open_repository(engine) as users:
            user = await users.get_by_id(subject)
            if user is None or not user.is_active:
                return user
            modules = await users.list_permission_modules(user.id)
        return user.with_permissions(modules)


class _AdministratorResolver(PrincipalResolver[P]):
    def __init__(
        self,
        token_service: TokenService,
        open_repository: AdministratorRepositoryOpener,
        probe: PrincipalResolutionProbe | None = None,
    ):
        super().__init__(token_service, probe)
        self._open_repository = open_repository

    async def _load(
        self,
        subject: str,
        context: RequestContext,
        probe: PrincipalResolutionProbe,
    ) -> P | None:
        async with self._open_repository() as administrators:
            return await administrators.get_by_id(subject)


class PlatformAdministratorResolver(_AdministratorResolver[PlatformAdministrator]):
    """Resolves platform administrators from the administrator-token cookie."""

    channel = CredentialChannel.PLATFORM_ADMINISTRATOR


class TenantAdministratorResolver(_AdministratorResolver[TenantAdministrator]):
    """Resolves tenant administrators from the x-tenant-token header."""

    channel = CredentialChannel.TENANT_ADMINISTRATOR
