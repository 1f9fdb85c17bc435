"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
lookups of principals in the platform and tenant databases. Emails are
logged only on misses; password hashes never reach the probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PrincipalRepositoryProbe(Protocol):
    """Domain probe for principal repository operations."""

    def principal_retrieved(self, kind: str, principal_id: str) -> None:
        """Record that a principal record was loaded."""
        ...

    def principal_not_found(self, kind: str, reference: str) -> None:
        """Record that no principal matched an id or email."""
        ...

    def permissions_loaded(self, user_id: str, modules: int, actions: int) -> None:
        """Record that a user's grants were read from the tenant database."""
        ...

    def with_context(self, context: ObservationContext) -> PrincipalRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPrincipalRepositoryProbe:
    """Default implementation of PrincipalRepositoryProbe using structlog."""

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
    ) -> DefaultPrincipalRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultPrincipalRepositoryProbe(logger=self._logger, context=context)

    def principal_retrieved(self, kind: str, principal_id: str) -> None:
        """Record that a principal record was loaded."""
        self._logger.debug(
            "principal_retrieved",
            kind=kind,
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def principal_not_found(self, kind: str, reference: str) -> None:
        """Record that no principal matched an id or email."""
        self._logger.debug(
            "principal_not_found",
            kind=kind,
            reference=reference,
            **self._get_context_kwargs(),
        )

    def permissions_loaded(self, user_id: str, modules: int, actions: int) -> None:
        """Record that a user's grants were read from the tenant database."""
        self._logger.debug(
            "permissions_loaded",
            user_id=user_id,
            modules=modules,
            actions=actions,
            **self._get_context_kwargs(),
        )
