"""Domain layer for the tenancy bounded context."""

from tenancy.domain.tenant import (
    ConnectionConfig,
    Tenant,
    TenantDatabase,
    TenantId,
)

__all__ = [
    "ConnectionConfig",
    "Tenant",
    "TenantDatabase",
    "TenantId",
]
