"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        tenant_id: Tenant the request was routed to (if any).
        principal_id: Identifier of the authenticated principal (if any).
        channel: Credential channel the principal authenticated through.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", tenant_id="t-1")
        probe = DefaultConnectionRegistryProbe().with_context(context)
    """

    request_id: str | None = None
    tenant_id: str | None = None
    principal_id: str | None = None
    channel: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.tenant_id is not None:
            result["tenant_id"] = self.tenant_id
        if self.principal_id is not None:
            result["principal_id"] = self.principal_id
        if self.channel is not None:
            result["channel"] = self.channel
        result.update(self.extra)
        return result

    def with_tenant(self, tenant_id: str) -> ObservationContext:
        """Create a new context with the tenant id set."""
        return replace(self, tenant_id=tenant_id)

    def with_principal(self, principal_id: str, channel: str) -> ObservationContext:
        """Create a new context with the authenticated principal set."""
        return replace(self, principal_id=principal_id, channel=channel)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
