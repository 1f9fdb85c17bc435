"""Domain probe for login operations.

Email addresses are logged on failure to support lockout investigations;
passwords never reach the probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class LoginProbe(Protocol):
    """Domain probe for login operations."""

    def login_succeeded(self, channel: str, principal_id: str) -> None:
        """Record a successful login."""
        ...

    def login_failed(self, channel: str, email: str, reason: str) -> None:
        """Record a rejected login."""
        ...

    def with_context(self, context: ObservationContext) -> LoginProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultLoginProbe:
    """Default implementation of LoginProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultLoginProbe:
        """Create a new probe with observation context bound."""
        return DefaultLoginProbe(logger=self._logger, context=context)

    def login_succeeded(self, channel: str, principal_id: str) -> None:
        """Record a successful login."""
        self._logger.info(
            "login_succeeded",
            channel=channel,
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def login_failed(self, channel: str, email: str, reason: str) -> None:
        """Record a rejected login."""
        self._logger.warning(
            "login_failed",
            channel=channel,
            email=email,
            reason=reason,
            **self._get_context_kwargs(),
        )
