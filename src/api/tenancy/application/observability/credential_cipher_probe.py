"""Domain probe for the credential cipher.

Integrity and configuration failures are operator-level problems and log
at error level under their own event names, apart from ordinary
authentication failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CredentialCipherProbe(Protocol):
    """Domain probe for credential cipher operations."""

    def secret_missing(self) -> None:
        """Record that the deployment secret is not configured."""
        ...

    def integrity_check_failed(self, reason: str) -> None:
        """Record that an encrypted credential did not verify."""
        ...

    def with_context(self, context: ObservationContext) -> CredentialCipherProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCredentialCipherProbe:
    """Default implementation of CredentialCipherProbe using structlog."""

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
    ) -> DefaultCredentialCipherProbe:
        """Create a new probe with observation context bound."""
        return DefaultCredentialCipherProbe(logger=self._logger, context=context)

    def secret_missing(self) -> None:
        """Record that the deployment secret is not configured."""
        self._logger.critical(
            "credential_cipher_secret_missing",
            **self._get_context_kwargs(),
        )

    def integrity_check_failed(self, reason: str) -> None:
        """Record that an encrypted credential did not verify."""
        self._logger.error(
            "credential_integrity_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
