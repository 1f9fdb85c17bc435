"""Domain probe for tenant resolution.

Captures events around reading the x-tenant-id header and attaching the
tenant connection to the request context.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantResolutionProbe(Protocol):
    """Domain probe for tenant resolution operations."""

    def tenant_header_absent(self) -> None:
        """Record that the request carried no tenant header."""
        ...

    def tenant_resolved(self, tenant_id: str) -> None:
        """Record that a tenant connection was attached to the request."""
        ...

    def invalid_tenant_id_format(self, raw_value: str) -> None:
        """Record that the header held something other than a UUID."""
        ...

    def tenant_resolution_deferred(
        self, tenant_id: str, reason: str, error: Exception
    ) -> None:
        """Record that resolution failed and the failure was deferred."""
        ...

    def tenant_resolution_misconfigured(
        self, tenant_id: str, error: Exception
    ) -> None:
        """Record an operator-level failure (secret unset, corrupt credential)."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolutionProbe:
    """Default implementation of TenantResolutionProbe using structlog."""

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
    ) -> DefaultTenantResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolutionProbe(logger=self._logger, context=context)

    def tenant_header_absent(self) -> None:
        """Record that the request carried no tenant header."""
        self._logger.debug(
            "tenant_header_absent",
            **self._get_context_kwargs(),
        )

    def tenant_resolved(self, tenant_id: str) -> None:
        """Record that a tenant connection was attached to the request."""
        self._logger.debug(
            "tenant_resolved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def invalid_tenant_id_format(self, raw_value: str) -> None:
        """Record that the header held something other than a UUID."""
        self._logger.warning(
            "invalid_tenant_id_format",
            raw_value=raw_value[:64],
            **self._get_context_kwargs(),
        )

    def tenant_resolution_deferred(
        self, tenant_id: str, reason: str, error: Exception
    ) -> None:
        """Record that resolution failed and the failure was deferred."""
        self._logger.warning(
            "tenant_resolution_deferred",
            tenant_id=tenant_id,
            reason=reason,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def tenant_resolution_misconfigured(
        self, tenant_id: str, error: Exception
    ) -> None:
        """Record an operator-level failure (secret unset, corrupt credential)."""
        self._logger.error(
            "tenant_resolution_misconfigured",
            tenant_id=tenant_id,
            error_type=type(error).__name__,
            error=str(error),
            **self._get_context_kwargs(),
        )
