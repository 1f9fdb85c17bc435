"""Tenant resolution middleware.

Runs before every handler: reads the x-tenant-id header, resolves the
tenant's connection through the registry and stores the resulting
RequestContext on ``request.state.request_context``. Never fails the
request itself; see ``resolve_tenant_context``.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware

from shared_kernel.middleware import TENANT_ID_HEADER
from shared_kernel.observability_context import ObservationContext
from tenancy.application.observability import DefaultTenantResolutionProbe
from tenancy.application.tenant_resolution import resolve_tenant_context

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from tenancy.application.connection_registry import TenantConnectionRegistry
    from tenancy.application.observability import TenantResolutionProbe

REQUEST_ID_HEADER = "x-request-id"


class TenantResolutionMiddleware(BaseHTTPMiddleware):
    """Attach the tenant connection (or its failure) to each request.

    The registry is read from ``app.state.connection_registry``, which the
    application lifespan owns.
    """

    def __init__(self, app: ASGIApp, probe: TenantResolutionProbe | None = None):
        super().__init__(app)
        self._probe = probe or DefaultTenantResolutionProbe()

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        registry: TenantConnectionRegistry = request.app.state.connection_registry
        probe = self._probe.with_context(ObservationContext(request_id=request_id))

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            context = await resolve_tenant_context(
                x_tenant_id=request.headers.get(TENANT_ID_HEADER),
                registry=registry,
                probe=probe,
            )
            request.state.request_context = context
            if context.tenant_id is not None:
                structlog.contextvars.bind_contextvars(tenant_id=context.tenant_id)
            try:
                response = await call_next(request)
            finally:
                structlog.contextvars.unbind_contextvars("tenant_id")
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
