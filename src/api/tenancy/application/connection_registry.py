"""Process-wide cache of live per-tenant database connections.

Tenants' credentials differ, so one global pool cannot serve them all, and
opening a connection per request is too expensive. The registry opens one
engine per tenant on first use and keeps it until it is evicted explicitly
(credential rotation, deactivation) or the process shuts down.

Concurrency model: the event loop is the only writer. A cache miss starts
one build task per tenant id; every caller that misses while the build is
in flight awaits that same task, so at most one engine is ever opened per
tenant. Callers await the task through ``asyncio.shield``: a caller being
cancelled does not cancel the build, which still completes and populates
the cache for the next request.
"""

from __future__ import annotations

import asyncio
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError

from infrastructure.database.exceptions import DatabaseConnectionError
from tenancy.application.observability import DefaultConnectionRegistryProbe
from tenancy.domain import TenantDatabase, TenantId
from tenancy.ports.exceptions import (
    TenantDatabaseNotConfiguredError,
    TenantDatabaseNotFoundError,
    TenantDisabledError,
    TenantNotFoundError,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from tenancy.application.credential_cipher import CredentialCipher
    from tenancy.application.observability import ConnectionRegistryProbe
    from tenancy.ports.repositories import ITenantDirectory


TenantDirectoryOpener = Callable[[], AbstractAsyncContextManager["ITenantDirectory"]]
"""Opens a short-lived directory (one platform session) for a lookup."""

TenantConnector = Callable[[TenantDatabase, str], Awaitable["AsyncEngine"]]
"""Opens a verified engine for a tenant database given the plaintext password."""


class TenantConnectionRegistry:
    """Lazily opens, caches and closes one engine per tenant."""

    def __init__(
        self,
        open_directory: TenantDirectoryOpener,
        cipher: CredentialCipher,
        connector: TenantConnector,
        probe: ConnectionRegistryProbe | None = None,
    ):
        """Initialize the registry.

        Args:
            open_directory: Factory of directory contexts used on cache miss.
            cipher: Cipher that decrypts the stored tenant passwords.
            connector: Opens and verifies a tenant engine.
            probe: Optional domain probe for observability.
        """
        self._open_directory = open_directory
        self._cipher = cipher
        self._connector = connector
        self._probe = probe or DefaultConnectionRegistryProbe()
        self._connections: dict[str, AsyncEngine] = {}
        self._pending: dict[str, asyncio.Task[AsyncEngine]] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def connected_tenants(self) -> frozenset[str]:
        """Ids of the tenants that currently hold a cached connection."""
        return frozenset(self._connections)

    async def get_connection(self, tenant_id: TenantId | str) -> AsyncEngine:
        """Return the tenant's engine, opening it on first use.

        Raises:
            TenantNotFoundError: The id is malformed or names no database
                (TenantDatabaseNotFoundError, TenantDatabaseNotConfiguredError).
            TenantDisabledError: The owning tenant is inactive.
            CredentialIntegrityError: The stored password does not decrypt.
            ConfigurationError: The deployment secret is unset.
            DatabaseConnectionError: The database could not be reached.
        """
        key = self._key(tenant_id)
        if key is None:
            self._probe.tenant_rejected(tenant_id=str(tenant_id), reason="malformed_id")
            raise TenantNotFoundError(str(tenant_id))

        engine = self._connections.get(key)
        if engine is not None:
            self._probe.connection_reused(tenant_id=key)
            return engine

        task = self._pending.get(key)
        if task is None:
            task = asyncio.create_task(
                self._open(key), name=f"open-tenant-connection:{key}"
            )
            task.add_done_callback(_consume_exception)
            self._pending[key] = task
        return await asyncio.shield(task)

    async def evict(self, tenant_id: TenantId | str) -> bool:
        """Close and forget the tenant's engine. No-op when none is cached.

        A build in flight for the tenant is awaited first, so the engine it
        produces is closed too and a reconfiguration never leaves a stale
        handle behind.

        Returns:
            True if an engine was closed.
        """
        key = self._key(tenant_id)
        if key is None:
            return False

        pending = self._pending.get(key)
        if pending is not None:
            await asyncio.wait([pending])

        engine = self._connections.pop(key, None)
        if engine is None:
            return False
        await engine.dispose()
        self._probe.connection_evicted(tenant_id=key)
        return True

    async def evict_all(self) -> int:
        """Close every cached engine (process shutdown).

        A failure to close one engine is recorded and does not stop the
        others from being closed.

        Returns:
            Number of engines closed.
        """
        if self._pending:
            await asyncio.wait(list(self._pending.values()))

        closed = 0
        for key in list(self._connections):
            engine = self._connections.pop(key)
            try:
                await engine.dispose()
            except Exception as e:
                self._probe.eviction_failed(tenant_id=key, error=e)
                continue
            self._probe.connection_evicted(tenant_id=key)
            closed += 1

        self._probe.all_connections_evicted(count=closed)
        return closed

    @staticmethod
    def _key(tenant_id: TenantId | str) -> str | None:
        if isinstance(tenant_id, TenantId):
            return tenant_id.value
        try:
            return TenantId.from_string(tenant_id).value
        except ValueError:
            return None

    async def _open(self, key: str) -> AsyncEngine:
        try:
            engine = await self._build(key)
            self._connections[key] = engine
            return engine
        finally:
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    async def _build(self, key: str) -> AsyncEngine:
        try:
            async with self._open_directory() as directory:
                database = await directory.get_database_for_tenant(
                    TenantId(value=key)
                )
        except (SQLAlchemyError, OSError) as e:
            error = DatabaseConnectionError("Tenant directory unavailable")
            self._probe.connection_failed(tenant_id=key, error=error)
            raise error from e

        if database is None:
            self._probe.tenant_rejected(tenant_id=key, reason="not_found")
            raise TenantDatabaseNotFoundError(key)
        if not database.tenant_is_active:
            self._probe.tenant_rejected(tenant_id=key, reason="disabled")
            raise TenantDisabledError(key)
        if not database.is_configured:
            self._probe.tenant_rejected(tenant_id=key, reason="not_configured")
            raise TenantDatabaseNotConfiguredError(key)

        assert database.connection_config is not None
        assert database.connection_config.password is not None
        # Key derivation is CPU-bound; run it off the event loop.
        password = await asyncio.to_thread(
            self._cipher.decrypt, database.connection_config.password
        )

        try:
            engine = await self._connector(database, password)
        except DatabaseConnectionError as e:
            self._probe.connection_failed(tenant_id=key, error=e)
            raise

        self._probe.connection_opened(tenant_id=key, database=database.database_name)
        return engine


def _consume_exception(task: asyncio.Task) -> None:
    # Every caller may have been cancelled; mark the outcome as retrieved.
    if not task.cancelled():
        task.exception()
