"""Protocol for tenant application service observability.

Defines the interface for domain probes that capture application-level
domain events for tenant administration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant application service operations."""

    def tenant_created(self, tenant_id: str, subdomain: str) -> None:
        """Record that a tenant was created."""
        ...

    def tenants_listed(self, count: int, total: int) -> None:
        """Record that a page of tenants was listed."""
        ...

    def tenant_updated(self, tenant_id: str, fields: list[str]) -> None:
        """Record that tenant attributes changed."""
        ...

    def tenant_status_changed(self, tenant_id: str, is_active: bool) -> None:
        """Record that a tenant was activated or deactivated."""
        ...

    def tenant_removed(self, tenant_id: str) -> None:
        """Record that a tenant was tombstoned."""
        ...

    def tenant_database_reconfigured(
        self, tenant_id: str, database: str, password_generated: bool
    ) -> None:
        """Record that a tenant's database coordinates or credentials changed."""
        ...

    def tenant_not_found(self, tenant_ref: str) -> None:
        """Record that a tenant was not found."""
        ...

    def duplicate_tenant(self, subdomain: str) -> None:
        """Record that a duplicate subdomain or database name was rejected."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, subdomain: str) -> None:
        """Record that a tenant was created."""
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int, total: int) -> None:
        """Record that a page of tenants was listed."""
        self._logger.debug(
            "tenants_listed",
            count=count,
            total=total,
            **self._get_context_kwargs(),
        )

    def tenant_updated(self, tenant_id: str, fields: list[str]) -> None:
        """Record that tenant attributes changed."""
        self._logger.info(
            "tenant_updated",
            tenant_id=tenant_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def tenant_status_changed(self, tenant_id: str, is_active: bool) -> None:
        """Record that a tenant was activated or deactivated."""
        self._logger.info(
            "tenant_status_changed",
            tenant_id=tenant_id,
            is_active=is_active,
            **self._get_context_kwargs(),
        )

    def tenant_removed(self, tenant_id: str) -> None:
        """Record that a tenant was tombstoned."""
        self._logger.info(
            "tenant_removed",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_database_reconfigured(
        self, tenant_id: str, database: str, password_generated: bool
    ) -> None:
        """Record that a tenant's database coordinates or credentials changed."""
        self._logger.info(
            "tenant_database_reconfigured",
            tenant_id=tenant_id,
            database=database,
            password_generated=password_generated,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_ref: str) -> None:
        """Record that a tenant was not found."""
        self._logger.debug(
            "tenant_not_found",
            tenant_ref=tenant_ref,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant(self, subdomain: str) -> None:
        """Record that a duplicate subdomain or database name was rejected."""
        self._logger.warning(
            "duplicate_tenant",
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )
