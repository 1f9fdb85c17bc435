"""Infrastructure adapters for the tenancy bounded context."""

from tenancy.infrastructure.tenant_connector import tenant_connector
from tenancy.infrastructure.tenant_directory import (
    TenantDirectory,
    tenant_directory_opener,
)

__all__ = [
    "TenantDirectory",
    "tenant_connector",
    "tenant_directory_opener",
]
