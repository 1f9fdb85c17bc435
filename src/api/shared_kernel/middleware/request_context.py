"""Request-scoped context threaded from tenant resolution to handlers.

The context is a pure value object: tenant resolution produces it, the
principal resolvers extend it with the authenticated principal, and
business handlers consume it. Nothing mutates it in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


TENANT_ID_HEADER = "x-tenant-id"


class TenantContextMissingError(Exception):
    """Raised when a tenant-scoped operation runs without a tenant header."""

    def __init__(self) -> None:
        super().__init__(f"The {TENANT_ID_HEADER} header is required")


class Principal(Protocol):
    """Minimal shape every authenticated principal exposes."""

    @property
    def id(self) -> str: ...

    @property
    def email(self) -> str: ...

    @property
    def first_name(self) -> str: ...

    @property
    def is_active(self) -> bool: ...


@dataclass(frozen=True)
class RequestContext:
    """What the core knows about the current request.

    Attributes:
        tenant_id: Raw tenant identifier from the x-tenant-id header, if sent.
        tenant_connection: Live engine for the tenant's database, when the
            tenant was resolved successfully.
        tenant_failure: The error tenant resolution ended with, kept so the
            component that needs the connection can surface it.
        principal: The authenticated principal, once a resolver ran.
    """

    tenant_id: str | None = None
    tenant_connection: AsyncEngine | None = None
    tenant_failure: Exception | None = None
    principal: Principal | None = None

    @property
    def has_tenant_connection(self) -> bool:
        return self.tenant_connection is not None

    def require_tenant_connection(self) -> AsyncEngine:
        """Return the tenant connection or fail explicitly.

        Never falls back to another connection: a request without a
        resolved tenant cannot reach tenant data.

        Raises:
            Exception: The upstream resolution failure, when there was one.
            TenantContextMissingError: When no tenant header was sent.
        """
        if self.tenant_connection is not None:
            return self.tenant_connection
        if self.tenant_failure is not None:
            raise self.tenant_failure
        raise TenantContextMissingError()

    def with_principal(self, principal: Principal) -> RequestContext:
        """Create a new context carrying the authenticated principal."""
        return replace(self, principal=principal)
