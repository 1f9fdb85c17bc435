"""Domain probe for the authorization checkpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorizationProbe(Protocol):
    """Domain probe for permit decisions."""

    def access_granted(self, principal_id: str, route_path: str) -> None:
        """Record that a principal holds the permit for a route."""
        ...

    def path_validation_skipped(self, principal_id: str, route_path: str) -> None:
        """Record that a route only required authentication."""
        ...

    def access_denied(self, principal_id: str, route_path: str) -> None:
        """Record that a principal lacks the permit for a route."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthorizationProbe:
    """Default implementation of AuthorizationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthorizationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthorizationProbe(logger=self._logger, context=context)

    def access_granted(self, principal_id: str, route_path: str) -> None:
        """Record that a principal holds the permit for a route."""
        self._logger.debug(
            "access_granted",
            principal_id=principal_id,
            route_path=route_path,
            **self._get_context_kwargs(),
        )

    def path_validation_skipped(self, principal_id: str, route_path: str) -> None:
        """Record that a route only required authentication."""
        self._logger.debug(
            "path_validation_skipped",
            principal_id=principal_id,
            route_path=route_path,
            **self._get_context_kwargs(),
        )

    def access_denied(self, principal_id: str, route_path: str) -> None:
        """Record that a principal lacks the permit for a route."""
        self._logger.warning(
            "access_denied",
            principal_id=principal_id,
            route_path=route_path,
            **self._get_context_kwargs(),
        )
