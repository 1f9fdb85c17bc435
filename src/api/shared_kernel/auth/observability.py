"""Domain probe for token issuing and verification.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to principal tokens. Token values are
never passed to the probe.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TokenServiceProbe(Protocol):
    """Domain probe for token service operations."""

    def token_issued(self, subject: str, expires_in_seconds: int) -> None:
        """Record that a token was issued for a subject."""
        ...

    def token_verified(self, subject: str) -> None:
        """Record that a token was successfully verified."""
        ...

    def token_expired(self) -> None:
        """Record that a correctly signed token was past its expiry."""
        ...

    def token_rejected(self, reason: str) -> None:
        """Record that a token was malformed or carried a bad signature."""
        ...

    def signing_secret_missing(self) -> None:
        """Record that the signing secret is not configured."""
        ...

    def with_context(self, context: ObservationContext) -> TokenServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTokenServiceProbe:
    """Default implementation of TokenServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTokenServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTokenServiceProbe(logger=self._logger, context=context)

    def token_issued(self, subject: str, expires_in_seconds: int) -> None:
        """Record that a token was issued for a subject."""
        self._logger.info(
            "token_issued",
            subject=subject,
            expires_in_seconds=expires_in_seconds,
            **self._get_context_kwargs(),
        )

    def token_verified(self, subject: str) -> None:
        """Record that a token was successfully verified."""
        self._logger.debug(
            "token_verified",
            subject=subject,
            **self._get_context_kwargs(),
        )

    def token_expired(self) -> None:
        """Record that a correctly signed token was past its expiry."""
        self._logger.warning(
            "token_verification_failed",
            reason="expired",
            **self._get_context_kwargs(),
        )

    def token_rejected(self, reason: str) -> None:
        """Record that a token was malformed or carried a bad signature."""
        self._logger.warning(
            "token_verification_failed",
            reason="invalid",
            detail=reason,
            **self._get_context_kwargs(),
        )

    def signing_secret_missing(self) -> None:
        """Record that the signing secret is not configured."""
        self._logger.critical(
            "token_signing_secret_missing",
            **self._get_context_kwargs(),
        )
