"""Authentication shared kernel module."""

from shared_kernel.auth.observability import (
    DefaultTokenServiceProbe,
    TokenServiceProbe,
)
from shared_kernel.auth.token_service import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenClaims,
    TokenService,
    TokenVerificationError,
)

__all__ = [
    "DefaultTokenServiceProbe",
    "ExpiredTokenError",
    "InvalidTokenError",
    "TokenClaims",
    "TokenService",
    "TokenServiceProbe",
    "TokenVerificationError",
]
