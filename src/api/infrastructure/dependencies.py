"""Shared infrastructure dependencies.

Provides ONLY infrastructure resources shared by every bounded context:
the token service built from settings and the request context. Does NOT
import from bounded contexts to maintain DDD boundaries.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import Request

from infrastructure.settings import get_auth_settings
from shared_kernel.auth import TokenService
from shared_kernel.middleware import RequestContext


@lru_cache
def get_token_service() -> TokenService:
    """Get application-scoped token service (singleton).

    Every principal channel signs and verifies with the same secret.

    Returns:
        TokenService configured from AuthSettings.
    """
    settings = get_auth_settings()
    return TokenService(
        secret=settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(hours=settings.token_ttl_hours),
    )


def get_request_context(request: Request) -> RequestContext:
    """Get the context tenant resolution attached to this request.

    Returns an empty context when the resolution middleware is not
    installed, so tenant-scoped operations fail explicitly downstream.
    """
    return getattr(request.state, "request_context", None) or RequestContext()
