"""Tenant application service for the tenancy bounded context.

Handles tenant administration (create, read, list, update, status, removal)
and the explicit reconfiguration of a tenant's database credentials. Every
operation that can invalidate a live connection evicts it from the
connection registry once the change is committed.
"""

from __future__ import annotations

import asyncio
import re
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shared_kernel.passwords import generate_random_secret
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.domain import ConnectionConfig, Tenant, TenantDatabase, TenantId
from tenancy.domain.tenant import normalize_subdomain
from tenancy.ports.exceptions import (
    DuplicateTenantError,
    InvalidTenantDatabaseConfigError,
    TenantDatabaseNotFoundError,
    TenantDisabledError,
    TenantNotFoundError,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from tenancy.application.connection_registry import TenantConnectionRegistry
    from tenancy.application.credential_cipher import CredentialCipher
    from tenancy.ports.repositories import ITenantDirectory


_DATABASE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")
_MAX_IDENTIFIER_LENGTH = 63


@dataclass(frozen=True)
class DatabaseReconfiguration:
    """Outcome of reconfiguring a tenant database.

    `generated_password` is set only when the password was generated by the
    service; it is the one time the plaintext leaves the process.
    """

    database: TenantDatabase
    generated_password: str | None = None


class TenantService:
    """Application service for tenant administration."""

    def __init__(
        self,
        directory: ITenantDirectory,
        session: AsyncSession,
        registry: TenantConnectionRegistry,
        cipher: CredentialCipher,
        database_prefix: str,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantService with dependencies.

        Args:
            directory: Repository for tenants and their database records
            session: Platform database session for transaction management
            registry: Connection registry to evict stale tenant connections from
            cipher: Cipher used to encrypt tenant database passwords
            database_prefix: Prefix of database names of new tenants
            probe: Optional domain probe for observability
        """
        self._directory = directory
        self._session = session
        self._registry = registry
        self._cipher = cipher
        self._database_prefix = database_prefix
        self._probe = probe or DefaultTenantServiceProbe()

    async def create_tenant(
        self,
        company_name: str,
        email: str,
        subdomain: str,
        cell_phone_number: str | None = None,
    ) -> Tenant:
        """Create a tenant and its (not yet configured) database record.

        Raises:
            DuplicateTenantError: If the subdomain or database name is taken
            ValueError: If the subdomain is not a valid DNS label
        """
        tenant = Tenant.create(
            company_name=company_name,
            email=email,
            subdomain=subdomain,
            cell_phone_number=cell_phone_number,
        )
        async with self._session.begin():
            if await self._directory.get_by_subdomain(tenant.subdomain) is not None:
                self._probe.duplicate_tenant(subdomain=tenant.subdomain)
                raise DuplicateTenantError(
                    f"Subdomain '{tenant.subdomain}' is already taken"
                )
            await self._directory.save(tenant)
            await self._directory.save_database(
                TenantDatabase(
                    id=str(uuid.uuid4()),
                    tenant_id=tenant.id.value,
                    database_name=tenant.database_name(self._database_prefix),
                    connection_config=None,
                )
            )

        self._probe.tenant_created(tenant_id=tenant.id.value, subdomain=tenant.subdomain)
        return tenant

    async def list_tenants(
        self,
        query: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Tenant], int]:
        """List one page of tenants and the total number of matches."""
        tenants, total = await self._directory.list_tenants(
            query=query.strip() if query else None,
            limit=limit,
            offset=offset,
        )
        self._probe.tenants_listed(count=len(tenants), total=total)
        return tenants, total

    async def get_tenant(self, tenant_id: str) -> Tenant:
        """Retrieve a tenant by id.

        Raises:
            TenantNotFoundError: If the id is malformed or names no tenant
        """
        return await self._load(tenant_id)

    async def find_by_subdomain(self, subdomain: str) -> Tenant:
        """Map a subdomain to an active tenant.

        Raises:
            TenantNotFoundError: If no tenant has this subdomain
            TenantDisabledError: If the tenant is inactive
        """
        normalized = subdomain.strip().lower()
        tenant = await self._directory.get_by_subdomain(normalized)
        if tenant is None:
            self._probe.tenant_not_found(tenant_ref=normalized)
            raise TenantNotFoundError(normalized)
        if not tenant.is_active:
            raise TenantDisabledError(tenant.id.value)
        return tenant

    async def update_tenant(
        self,
        tenant_id: str,
        company_name: str | None = None,
        email: str | None = None,
        subdomain: str | None = None,
        cell_phone_number: str | None = None,
    ) -> Tenant:
        """Change tenant attributes. Omitted arguments are left untouched.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            DuplicateTenantError: If the new subdomain is taken
        """
        async with self._session.begin():
            tenant = await self._load(tenant_id)
            changed: list[str] = []
            if subdomain is not None:
                normalized = normalize_subdomain(subdomain)
                if normalized != tenant.subdomain:
                    other = await self._directory.get_by_subdomain(normalized)
                    if other is not None:
                        self._probe.duplicate_tenant(subdomain=normalized)
                        raise DuplicateTenantError(
                            f"Subdomain '{normalized}' is already taken"
                        )
                    tenant.subdomain = normalized
                    changed.append("subdomain")
            if company_name is not None:
                tenant.company_name = company_name.strip()
                changed.append("company_name")
            if email is not None:
                tenant.email = email.strip().lower()
                changed.append("email")
            if cell_phone_number is not None:
                tenant.cell_phone_number = cell_phone_number
                changed.append("cell_phone_number")
            await self._directory.save(tenant)

        self._probe.tenant_updated(tenant_id=tenant.id.value, fields=changed)
        return tenant

    async def toggle_status(self, tenant_id: str) -> Tenant:
        """Activate or deactivate a tenant.

        The tenant's cached connection is closed either way, so a
        deactivated tenant stops being served immediately.
        """
        async with self._session.begin():
            tenant = await self._load(tenant_id)
            tenant.toggle_status()
            await self._directory.save(tenant)

        await self._registry.evict(tenant.id)
        self._probe.tenant_status_changed(
            tenant_id=tenant.id.value, is_active=tenant.is_active
        )
        return tenant

    async def remove_tenant(self, tenant_id: str) -> None:
        """Tombstone a tenant and close its cached connection."""
        async with self._session.begin():
            tenant = await self._load(tenant_id)
            await self._directory.soft_delete(tenant.id)

        await self._registry.evict(tenant.id)
        self._probe.tenant_removed(tenant_id=tenant.id.value)

    async def reconfigure_database(
        self,
        tenant_id: str,
        database_name: str,
        host: str,
        port: int,
        username: str,
        password: str | None = None,
    ) -> DatabaseReconfiguration:
        """Point a tenant at new database coordinates and credentials.

        The password is encrypted before it is stored. When no password is
        given a random one is generated and returned once. The tenant's
        cached connection is evicted after the change is committed, so the
        next access reads the new configuration.

        Raises:
            InvalidTenantDatabaseConfigError: If the input is malformed
            TenantNotFoundError: If the tenant or its database record is missing
        """
        database_name, host, username = (
            database_name.strip(),
            host.strip(),
            username.strip(),
        )
        self._validate_database_input(database_name, host, port, username, password)

        generated = None
        if password is None:
            generated = generate_random_secret()
            password = generated
        encrypted = await asyncio.to_thread(self._cipher.encrypt, password)

        async with self._session.begin():
            tenant = await self._load(tenant_id)
            database = await self._directory.get_database_for_tenant(tenant.id)
            if database is None:
                raise TenantDatabaseNotFoundError(tenant.id.value)
            database = database.reconfigured(
                database_name=database_name,
                connection_config=ConnectionConfig(
                    host=host,
                    port=port,
                    username=username,
                    password=encrypted,
                ),
            )
            await self._directory.save_database(database)

        await self._registry.evict(tenant.id)
        self._probe.tenant_database_reconfigured(
            tenant_id=tenant.id.value,
            database=database_name,
            password_generated=generated is not None,
        )
        return DatabaseReconfiguration(database=database, generated_password=generated)

    @staticmethod
    def _validate_database_input(
        database_name: str,
        host: str,
        port: int,
        username: str,
        password: str | None,
    ) -> None:
        if not _DATABASE_NAME_PATTERN.match(database_name):
            raise InvalidTenantDatabaseConfigError(
                "database_name must start with a letter or underscore and contain "
                "only letters, digits and underscores (max 63 characters)"
            )
        if not host:
            raise InvalidTenantDatabaseConfigError("host must not be empty")
        if isinstance(port, bool) or not 1 <= port <= 65535:
            raise InvalidTenantDatabaseConfigError("port must be between 1 and 65535")
        if not username or len(username) > _MAX_IDENTIFIER_LENGTH:
            raise InvalidTenantDatabaseConfigError(
                "username must be between 1 and 63 characters"
            )
        if password is not None and not password:
            raise InvalidTenantDatabaseConfigError("password must not be empty")

    async def _load(self, tenant_id: str) -> Tenant:
        try:
            parsed = TenantId.from_string(tenant_id)
        except ValueError:
            self._probe.tenant_not_found(tenant_ref=tenant_id)
            raise TenantNotFoundError(tenant_id) from None
        tenant = await self._directory.get(parsed)
        if tenant is None:
            self._probe.tenant_not_found(tenant_ref=parsed.value)
            raise TenantNotFoundError(parsed.value)
        return tenant
