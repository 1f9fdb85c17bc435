"""Protocol for principal resolution observability.

Defines the interface for domain probes that capture authentication events
of every credential channel. Failures carry a reason (missing, expired,
invalid, not_found, inactive) so they can be told apart in logs even
though they all answer 401.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PrincipalResolutionProbe(Protocol):
    """Domain probe for principal resolution."""

    def principal_resolved(
        self, channel: str, principal_id: str, permitted_endpoints: int
    ) -> None:
        """Record that a principal was authenticated on a channel."""
        ...

    def authentication_failed(self, channel: str, reason: str) -> None:
        """Record that authentication on a channel failed."""
        ...

    def tenant_connection_unavailable(self, channel: str, reason: str) -> None:
        """Record that a tenant user could not be resolved for lack of a tenant."""
        ...

    def with_context(self, context: ObservationContext) -> PrincipalResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPrincipalResolutionProbe:
    """Default implementation of PrincipalResolutionProbe using structlog."""

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
    ) -> DefaultPrincipalResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultPrincipalResolutionProbe(logger=self._logger, context=context)

    def principal_resolved(
        self, channel: str, principal_id: str, permitted_endpoints: int
    ) -> None:
        """Record that a principal was authenticated on a channel."""
        self._logger.info(
            "principal_resolved",
            channel=channel,
            principal_id=principal_id,
            permitted_endpoints=permitted_endpoints,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, channel: str, reason: str) -> None:
        """Record that authentication on a channel failed."""
        self._logger.warning(
            "authentication_failed",
            channel=channel,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def tenant_connection_unavailable(self, channel: str, reason: str) -> None:
        """Record that a tenant user could not be resolved for lack of a tenant."""
        self._logger.warning(
            "tenant_connection_unavailable",
            channel=channel,
            reason=reason,
            **self._get_context_kwargs(),
        )
