"""Tenancy presentation layer: tenant routes, resolution middleware, errors."""

from tenancy.presentation.errors import register_tenancy_exception_handlers
from tenancy.presentation.middleware import TenantResolutionMiddleware
from tenancy.presentation.routes import router

__all__ = [
    "TenantResolutionMiddleware",
    "register_tenancy_exception_handlers",
    "router",
]
