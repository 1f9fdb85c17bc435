"""Domain probe for the tenant connection registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionRegistryProbe(Protocol):
    """Domain probe for tenant connection lifecycle events."""

    def connection_reused(self, tenant_id: str) -> None:
        """Record that a cached tenant connection was handed out."""
        ...

    def connection_opened(self, tenant_id: str, database: str) -> None:
        """Record that a new tenant connection was opened and cached."""
        ...

    def connection_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that opening a tenant connection failed (nothing cached)."""
        ...

    def tenant_rejected(self, tenant_id: str, reason: str) -> None:
        """Record that a tenant cannot get a connection (unknown, disabled...)."""
        ...

    def connection_evicted(self, tenant_id: str) -> None:
        """Record that a cached tenant connection was closed and removed."""
        ...

    def eviction_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that closing a tenant connection raised."""
        ...

    def all_connections_evicted(self, count: int) -> None:
        """Record that every cached connection was closed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionRegistryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionRegistryProbe:
    """Default implementation of ConnectionRegistryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultConnectionRegistryProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionRegistryProbe(logger=self._logger, context=context)

    def connection_reused(self, tenant_id: str) -> None:
        """Record that a cached tenant connection was handed out."""
        self._logger.debug(
            "tenant_connection_reused",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def connection_opened(self, tenant_id: str, database: str) -> None:
        """Record that a new tenant connection was opened and cached."""
        self._logger.info(
            "tenant_connection_opened",
            tenant_id=tenant_id,
            database=database,
            **self._get_context_kwargs(),
        )

    def connection_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that opening a tenant connection failed (nothing cached)."""
        self._logger.error(
            "tenant_connection_failed",
            tenant_id=tenant_id,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def tenant_rejected(self, tenant_id: str, reason: str) -> None:
        """Record that a tenant cannot get a connection (unknown, disabled...)."""
        self._logger.warning(
            "tenant_connection_rejected",
            tenant_id=tenant_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def connection_evicted(self, tenant_id: str) -> None:
        """Record that a cached tenant connection was closed and removed."""
        self._logger.info(
            "tenant_connection_evicted",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def eviction_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that closing a tenant connection raised."""
        self._logger.error(
            "tenant_connection_eviction_failed",
            tenant_id=tenant_id,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def all_connections_evicted(self, count: int) -> None:
        """Record that every cached connection was closed."""
        self._logger.info(
            "tenant_connections_evicted",
            count=count,
            **self._get_context_kwargs(),
        )
