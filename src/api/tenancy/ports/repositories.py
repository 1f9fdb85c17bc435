"""Repository protocols (ports) for the tenancy bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain import Tenant, TenantDatabase, TenantId


@runtime_checkable
class ITenantDirectory(Protocol):
    """Persistent catalog of tenants and their database configuration.

    Soft-deleted tenants are invisible to every method.
    """

    async def get(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by id."""
        ...

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Retrieve a tenant by its (lower-case) subdomain."""
        ...

    async def list_tenants(
        self, query: str | None, limit: int, offset: int
    ) -> tuple[list[Tenant], int]:
        """Return one page of tenants and the total number of matches.

        Args:
            query: Optional substring matched against company name, email
                and subdomain (case-insensitive)
            limit: Page size
            offset: Rows to skip
        """
        ...

    async def save(self, tenant: Tenant) -> None:
        """Insert or update a tenant.

        Raises:
            DuplicateTenantError: If the subdomain is already taken
        """
        ...

    async def soft_delete(self, tenant_id: TenantId) -> None:
        """Tombstone a tenant and its database record."""
        ...

    async def get_database_for_tenant(self, tenant_id: TenantId) -> TenantDatabase | None:
        """Retrieve the database record of a tenant, with the owner's status."""
        ...

    async def save_database(self, database: TenantDatabase) -> None:
        """Insert or update a tenant database record.

        Raises:
            DuplicateTenantError: If the database name is already taken
        """
        ...
