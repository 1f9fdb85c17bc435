"""PostgreSQL implementation of ITenantDirectory.

Stores tenants and their database records in the platform database.
Tombstoned rows (deleted_at set) are filtered out of every query.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.domain import ConnectionConfig, Tenant, TenantDatabase, TenantId
from tenancy.infrastructure.models import TenantDatabaseModel, TenantModel
from tenancy.ports.exceptions import DuplicateTenantError
from tenancy.ports.repositories import ITenantDirectory


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TenantDirectory(ITenantDirectory):
    """Repository managing PostgreSQL storage for tenants."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with a platform database session."""
        self._session = session

    async def get(self, tenant_id: TenantId) -> Tenant | None:
        model = await self._get_model(tenant_id.value)
        return self._to_domain(model) if model is not None else None

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        stmt = select(TenantModel).where(
            TenantModel.subdomain == subdomain,
            TenantModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def list_tenants(
        self, query: str | None, limit: int, offset: int
    ) -> tuple[list[Tenant], int]:
        """Return one page of tenants ordered by company name."""
        stmt = select(TenantModel).where(TenantModel.deleted_at.is_(None))
        if query:
            pattern = f"%{_escape_like(query)}%"
            stmt = stmt.where(
                or_(
                    TenantModel.company_name.ilike(pattern, escape="\\"),
                    TenantModel.email.ilike(pattern, escape="\\"),
                    TenantModel.subdomain.ilike(pattern, escape="\\"),
                )
            )

        total = await self._session.scalar(
            select(func.count()).select_from(stmt.subquery())
        )
        result = await self._session.execute(
            stmt.order_by(TenantModel.company_name, TenantModel.id)
            .limit(limit)
            .offset(offset)
        )
        tenants = [self._to_domain(model) for model in result.scalars().all()]
        return tenants, int(total or 0)

    async def save(self, tenant: Tenant) -> None:
        """Insert or update a tenant.

        Raises:
            DuplicateTenantError: If the subdomain is already taken
        """
        model = await self._get_model(tenant.id.value)
        if model is None:
            model = TenantModel(id=tenant.id.value)
            self._session.add(model)

        model.company_name = tenant.company_name
        model.email = tenant.email
        model.subdomain = tenant.subdomain
        model.cell_phone_number = tenant.cell_phone_number
        model.is_created_db = tenant.is_created_db
        model.is_active = tenant.is_active

        await self._flush(f"Subdomain '{tenant.subdomain}' is already taken")

    async def soft_delete(self, tenant_id: TenantId) -> None:
        model = await self._get_model(tenant_id.value)
        if model is None:
            return
        model.mark_deleted()
        database = await self._get_database_model(tenant_id.value)
        if database is not None:
            database.mark_deleted()
        await self._session.flush()

    async def get_database_for_tenant(
        self, tenant_id: TenantId
    ) -> TenantDatabase | None:
        """Fetch the tenant's database record joined with the tenant status."""
        stmt = (
            select(TenantDatabaseModel, TenantModel.is_active)
            .join(TenantModel, TenantModel.id == TenantDatabaseModel.tenant_id)
            .where(
                TenantDatabaseModel.tenant_id == tenant_id.value,
                TenantDatabaseModel.deleted_at.is_(None),
                TenantModel.deleted_at.is_(None),
            )
        )
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        model, tenant_is_active = row
        return self._database_to_domain(model, tenant_is_active=tenant_is_active)

    async def save_database(self, database: TenantDatabase) -> None:
        """Insert or update a tenant database record.

        Raises:
            DuplicateTenantError: If the database name is already taken
        """
        stmt = select(TenantDatabaseModel).where(TenantDatabaseModel.id == database.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            model = TenantDatabaseModel(id=database.id, tenant_id=database.tenant_id)
            self._session.add(model)

        model.database_name = database.database_name
        model.connection_config = (
            database.connection_config.as_dict()
            if database.connection_config is not None
            else None
        )
        model.is_migrated = database.is_migrated

        await self._flush(f"Database '{database.database_name}' is already taken")

    async def _flush(self, duplicate_message: str) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateTenantError(duplicate_message) from e

    async def _get_model(self, tenant_id: str) -> TenantModel | None:
        stmt = select(TenantModel).where(
            TenantModel.id == tenant_id,
            TenantModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_database_model(self, tenant_id: str) -> TenantDatabaseModel | None:
        stmt = select(TenantDatabaseModel).where(
            TenantDatabaseModel.tenant_id == tenant_id,
            TenantDatabaseModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        return Tenant(
            id=TenantId(value=model.id),
            company_name=model.company_name,
            email=model.email,
            subdomain=model.subdomain,
            cell_phone_number=model.cell_phone_number,
            is_created_db=model.is_created_db,
            is_active=model.is_active,
        )

    @staticmethod
    def _database_to_domain(
        model: TenantDatabaseModel, tenant_is_active: bool
    ) -> TenantDatabase:
        return TenantDatabase(
            id=model.id,
            tenant_id=model.tenant_id,
            database_name=model.database_name,
            connection_config=ConnectionConfig.from_dict(model.connection_config),
            is_migrated=model.is_migrated,
            tenant_is_active=tenant_is_active,
        )


def tenant_directory_opener(
    get_sessionmaker: Callable[[], async_sessionmaker[AsyncSession]],
):
    """Build the directory factory the connection registry uses on cache miss.

    Each lookup gets its own short-lived platform session, independent of
    any request session.
    """

    @asynccontextmanager
    async def open_directory() -> AsyncIterator[TenantDirectory]:
        async with get_sessionmaker()() as session:
            yield TenantDirectory(session)

    return open_directory
