"""Request-scoped values shared across bounded contexts.

Tenant resolution (tenancy) produces the RequestContext; principal
resolution (iam) extends it; business handlers consume it.
"""

from shared_kernel.middleware.request_context import (
    TENANT_ID_HEADER,
    Principal,
    RequestContext,
    TenantContextMissingError,
)

__all__ = [
    "TENANT_ID_HEADER",
    "Principal",
    "RequestContext",
    "TenantContextMissingError",
]
