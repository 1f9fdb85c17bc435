"""Protocol for administrator management observability.

Defines the interface for domain probes that capture application-level
domain events for administrator account management. Events carry the
account kind so both administrator tables share one vocabulary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AdministratorServiceProbe(Protocol):
    """Domain probe for administrator management operations."""

    def administrator_created(self, kind: str, administrator_id: str) -> None:
        """Record that an administrator account was created."""
        ...

    def administrators_listed(self, kind: str, count: int, total: int) -> None:
        """Record that a page of administrators was listed."""
        ...

    def administrator_updated(
        self, kind: str, administrator_id: str, fields: list[str]
    ) -> None:
        """Record that account attributes changed."""
        ...

    def administrator_status_changed(
        self, kind: str, administrator_id: str, is_active: bool
    ) -> None:
        """Record that an account was activated or deactivated."""
        ...

    def administrator_removed(self, kind: str, administrator_id: str) -> None:
        """Record that an account was tombstoned."""
        ...

    def password_reset(self, kind: str, administrator_id: str) -> None:
        """Record that a generated password replaced an account's password."""
        ...

    def password_changed(self, kind: str, administrator_id: str) -> None:
        """Record that an administrator changed their own password."""
        ...

    def password_change_rejected(self, kind: str, administrator_id: str) -> None:
        """Record that a password change failed the old password check."""
        ...

    def administrator_not_found(self, kind: str, administrator_ref: str) -> None:
        """Record that an administrator was not found."""
        ...

    def duplicate_administrator(self, kind: str) -> None:
        """Record that an email already taken by another account was rejected."""
        ...

    def protected_administrator_rejected(
        self, kind: str, administrator_id: str, operation: str
    ) -> None:
        """Record that an operation on an admin-role account was refused."""
        ...

    def with_context(self, context: ObservationContext) -> AdministratorServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAdministratorServiceProbe:
    """Default implementation of AdministratorServiceProbe using structlog."""

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
    ) -> DefaultAdministratorServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultAdministratorServiceProbe(logger=self._logger, context=context)

    def administrator_created(self, kind: str, administrator_id: str) -> None:
        self._logger.info(
            "administrator_created",
            kind=kind,
            administrator_id=administrator_id,
            **self._get_context_kwargs(),
        )

    def administrators_listed(self, kind: str, count: int, total: int) -> None:
        self._logger.debug(
            "administrators_listed",
            kind=kind,
            count=count,
            total=total,
            **self._get_context_kwargs(),
        )

    def administrator_updated(
        self, kind: str, administrator_id: str, fields: list[str]
    ) -> None:
        self._logger.info(
            "administrator_updated",
            kind=kind,
            administrator_id=administrator_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def administrator_status_changed(
        self, kind: str, administrator_id: str, is_active: bool
    ) -> None:
        self._logger.info(
            "administrator_status_changed",
            kind=kind,
            administrator_id=administrator_id,
            is_active=is_active,
            **self._get_context_kwargs(),
        )

    def administrator_removed(self, kind: str, administrator_id: str) -> None:
        self._logger.info(
            "administrator_removed",
            kind=kind,
            administrator_id=administrator_id,
            **self._get_context_kwargs(),
        )

    def password_reset(self, kind: str, administrator_id: str) -> None:
        self._logger.info(
            "administrator_password_reset",
            kind=kind,
            administrator_id=administrator_id,
            **self._get_context_kwargs(),
        )

    def password_changed(self, kind: str, administrator_id: str) -> None:
        self._logger.info(
            "administrator_password_changed",
            kind=kind,
            administrator_id=administrator_id,
            **self._get_context_kwargs(),
        )

    def password_change_rejected(self, kind: str, administrator_id: str) -> None:
        self._logger.warning(
            "administrator_password_change_rejected",
            kind=kind,
            administrator_id=administrator_id,
            **self._get_context_kwargs(),
        )

    def administrator_not_found(self, kind: str, administrator_ref: str) -> None:
        self._logger.debug(
            "administrator_not_found",
            kind=kind,
            administrator_ref=administrator_ref,
            **self._get_context_kwargs(),
        )

    def duplicate_administrator(self, kind: str) -> None:
        self._logger.warning(
            "duplicate_administrator",
            kind=kind,
            **self._get_context_kwargs(),
        )

    def protected_administrator_rejected(
        self, kind: str, administrator_id: str, operation: str
    ) -> None:
        self._logger.warning(
            "protected_administrator_rejected",
            kind=kind,
            administrator_id=administrator_id,
            operation=operation,
            **self._get_context_kwargs(),
        )
