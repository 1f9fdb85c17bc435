"""Signed principal tokens.

Issues and verifies HS256 JWTs carrying the principal id. Every principal
channel (tenant user, platform administrator, tenant administrator) uses
the same shared secret; the channel a token arrives on decides which
principal store it is resolved against.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from shared_kernel.auth.observability import DefaultTokenServiceProbe
from shared_kernel.exceptions import ConfigurationError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import TokenServiceProbe


@dataclass(frozen=True)
class TokenClaims:
    """Verified token claims."""

    subject: str
    issued_at: datetime | None
    expires_at: datetime


class TokenVerificationError(Exception):
    """Base class for tokens that cannot be accepted."""

    pass


class ExpiredTokenError(TokenVerificationError):
    """Raised when a correctly signed token is past its expiry."""

    def __init__(self) -> None:
        super().__init__("Token has expired")


class InvalidTokenError(TokenVerificationError):
    """Raised when a token is malformed or its signature does not verify."""

    def __init__(self) -> None:
        super().__init__("Token is not valid")


class TokenService:
    """Issues and verifies principal tokens with a shared secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=6),
        subject_claim: str = "id",
        probe: TokenServiceProbe | None = None,
    ):
        """Initialize the token service.

        Args:
            secret: Shared signing secret. Empty means unconfigured.
            algorithm: HMAC algorithm used to sign tokens.
            ttl: Lifetime of issued tokens.
            subject_claim: Claim holding the principal id.
            probe: Optional domain probe for observability.
        """
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._subject_claim = subject_claim
        self._probe = probe or DefaultTokenServiceProbe()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def _require_secret(self) -> str:
        if not self._secret:
            self._probe.signing_secret_missing()
            raise ConfigurationError("Token signing secret is not configured")
        return self._secret

    def issue(self, subject: str) -> str:
        """Issue a signed token for a principal id.

        Raises:
            ConfigurationError: If the signing secret is not configured.
        """
        secret = self._require_secret()
        now = datetime.now(tz=timezone.utc)
        claims = {
            self._subject_claim: subject,
            "iat": now,
            "exp": now + self._ttl,
        }
        token = jwt.encode(claims, secret, algorithm=self._algorithm)
        self._probe.token_issued(
            subject=subject,
            expires_in_seconds=int(self._ttl.total_seconds()),
        )
        return token

    def verify(self, token: str) -> TokenClaims:
        """Verify signature and expiry of a token.

        Args:
            token: The encoded JWT.

        Returns:
            TokenClaims with the principal id.

        Raises:
            ExpiredTokenError: Signature is valid but the token has expired.
            InvalidTokenError: Token is malformed, unsigned by our secret, or
                lacks the subject claim.
            ConfigurationError: If the signing secret is not configured.
        """
        secret = self._require_secret()
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "verify_exp": True},
            )
        except ExpiredSignatureError as e:
            self._probe.token_expired()
            raise ExpiredTokenError() from e
        except JWTError as e:
            self._probe.token_rejected(reason=type(e).__name__)
            raise InvalidTokenError() from e

        subject = claims.get(self._subject_claim)
        if subject is None or str(subject) == "":
            self._probe.token_rejected(reason=f"missing {self._subject_claim} claim")
            raise InvalidTokenError()

        issued_at = claims.get("iat")
        self._probe.token_verified(subject=str(subject))
        return TokenClaims(
            subject=str(subject),
            issued_at=(
                datetime.fromtimestamp(issued_at, tz=timezone.utc)
                if issued_at is not None
                else None
            ),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
