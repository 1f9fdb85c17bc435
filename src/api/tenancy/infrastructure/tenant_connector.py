"""Opens asyncpg engines for tenant databases."""

from __future__ import annotations

from typing import TYPE_CHECKING

from infrastructure.database.engines import open_tenant_engine

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from infrastructure.settings import TenantDatabaseSettings
    from tenancy.domain import TenantDatabase


def tenant_connector(settings: TenantDatabaseSettings):
    """Build the connector the registry uses to open tenant engines.

    Args:
        settings: Pool settings shared by every tenant engine.
    """

    async def connect(database: TenantDatabase, password: str) -> AsyncEngine:
        config = database.connection_config
        assert config is not None
        return await open_tenant_engine(
            host=config.host,
            port=config.port,
            username=config.username,
            password=password,
            database=database.database_name,
            settings=settings,
        )

    return connect
