"""Unit tests for TokenService."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from jose import jwt

from shared_kernel.auth import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenService,
    TokenVerificationError,
)
from shared_kernel.exceptions import ConfigurationError

SECRET = "test-signing-secret"


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def service(probe: MagicMock) -> TokenService:
    return TokenService(secret=SECRET, ttl=timedelta(hours=6), probe=probe)


def _encode(claims: dict, secret: str = SECRET) -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


class TestIssue:
    """Tests for issuing tokens."""

    def test_subject_round_trips(self, service: TokenService):
        claims = service.verify(service.issue("user-1"))

        assert claims.subject == "user-1"

    def test_expiry_follows_ttl(self, service: TokenService):
        before = datetime.now(tz=timezone.utc)

        claims = service.verify(service.issue("user-1"))

        expected = before + timedelta(hours=6)
        assert abs((claims.expires_at - expected).total_seconds()) < 5
        assert claims.issued_at is not None

    def test_subject_travels_in_id_claim(self, service: TokenService):
        payload = jwt.decode(service.issue("user-1"), SECRET, algorithms=["HS256"])

        assert payload["id"] == "user-1"

    def test_issue_reports_to_probe(self, service: TokenService, probe: MagicMock):
        service.issue("user-1")

        probe.token_issued.assert_called_once_with(
            subject="user-1", expires_in_seconds=6 * 3600
        )


class TestVerify:
    """Expired and invalid tokens are distinguishable."""

    def test_expired_token(self, service: TokenService, probe: MagicMock):
        past = datetime.now(tz=timezone.utc) - timedelta(hours=1)
        token = _encode({"id": "user-1", "iat": past - timedelta(hours=6), "exp": past})

        with pytest.raises(ExpiredTokenError):
            service.verify(token)
        probe.token_expired.assert_called_once()

    def test_wrong_signature_is_invalid(self, service: TokenService):
        token = TokenService(secret="another-secret").issue("user-1")

        with pytest.raises(InvalidTokenError):
            service.verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed_token_is_invalid(self, service: TokenService, token: str):
        with pytest.raises(InvalidTokenError):
            service.verify(token)

    def test_missing_expiry_is_invalid(self, service: TokenService):
        with pytest.raises(InvalidTokenError):
            service.verify(_encode({"id": "user-1"}))

    def test_missing_subject_is_invalid(
        self, service: TokenService, probe: MagicMock
    ):
        exp = datetime.now(tz=timezone.utc) + timedelta(hours=1)

        with pytest.raises(InvalidTokenError):
            service.verify(_encode({"sub": "user-1", "exp": exp}))
        probe.token_rejected.assert_called_once_with(reason="missing id claim")

    def test_both_errors_share_a_base(self):
        assert issubclass(ExpiredTokenError, TokenVerificationError)
        assert issubclass(InvalidTokenError, TokenVerificationError)
        assert not issubclass(ExpiredTokenError, InvalidTokenError)


class TestMissingSecret:
    """An unset secret is a configuration error, not an auth failure."""

    def test_issue_without_secret(self):
        with pytest.raises(ConfigurationError):
            TokenService(secret="").issue("user-1")

    def test_verify_without_secret(self, service: TokenService):
        token = service.issue("user-1")

        with pytest.raises(ConfigurationError):
            TokenService(secret="").verify(token)
