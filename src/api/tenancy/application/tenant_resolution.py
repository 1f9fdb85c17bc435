"""Resolve the tenant named by a request into a RequestContext.

This is the core of the tenant resolution middleware, kept free of the web
framework so it can be exercised directly. A request without the header
proceeds without a connection (platform routes never need one). When
resolution fails, the failure is logged and stored on the context instead
of failing the request: only the component that actually needs the tenant
connection surfaces it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from infrastructure.database.exceptions import DatabaseConnectionError
from shared_kernel.exceptions import ConfigurationError
from shared_kernel.middleware import RequestContext
from tenancy.domain import TenantId
from tenancy.ports.exceptions import (
    CredentialIntegrityError,
    TenantDisabledError,
    TenantNotFoundError,
)

if TYPE_CHECKING:
    from tenancy.application.connection_registry import TenantConnectionRegistry
    from tenancy.application.observability import TenantResolutionProbe


_DEFERRED_FAILURES: dict[type[Exception], str] = {
    TenantNotFoundError: "not_found",
    TenantDisabledError: "disabled",
    DatabaseConnectionError: "connection_failed",
}


def _reason(error: Exception) -> str:
    for error_type, reason in _DEFERRED_FAILURES.items():
        if isinstance(error, error_type):
            return reason
    return "unknown"


async def resolve_tenant_context(
    x_tenant_id: str | None,
    registry: TenantConnectionRegistry,
    probe: TenantResolutionProbe,
) -> RequestContext:
    """Build the request context for the tenant named by the header.

    Args:
        x_tenant_id: The x-tenant-id header value, or None if missing.
        registry: Process-wide tenant connection registry.
        probe: Domain probe for observability.

    Returns:
        RequestContext with the tenant connection attached, or with the
        resolution failure recorded, or empty when no header was sent.
    """
    if x_tenant_id is None or not x_tenant_id.strip():
        probe.tenant_header_absent()
        return RequestContext()

    raw_value = x_tenant_id.strip()
    try:
        tenant_id = TenantId.from_string(raw_value)
    except ValueError:
        probe.invalid_tenant_id_format(raw_value=raw_value)
        return RequestContext(
            tenant_id=raw_value,
            tenant_failure=TenantNotFoundError(raw_value),
        )

    try:
        connection = await registry.get_connection(tenant_id)
    except (TenantNotFoundError, TenantDisabledError, DatabaseConnectionError) as e:
        probe.tenant_resolution_deferred(
            tenant_id=tenant_id.value, reason=_reason(e), error=e
        )
        return RequestContext(tenant_id=tenant_id.value, tenant_failure=e)
    except (CredentialIntegrityError, ConfigurationError) as e:
        probe.tenant_resolution_misconfigured(tenant_id=tenant_id.value, error=e)
        return RequestContext(tenant_id=tenant_id.value, tenant_failure=e)

    probe.tenant_resolved(tenant_id=tenant_id.value)
    return RequestContext(tenant_id=tenant_id.value, tenant_connection=connection)
