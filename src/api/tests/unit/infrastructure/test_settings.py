"""Unit tests for infrastructure settings."""

import pytest
from pydantic import SecretStr, ValidationError

from infrastructure.settings import (
    AuthSettings,
    CipherSettings,
    CORSSettings,
    DatabaseSettings,
    TenantDatabaseSettings,
)


class TestDatabaseSettings:
    """Tests for platform database settings."""

    def test_default_pool_settings(self):
        settings = DatabaseSettings()
        assert settings.pool_size >= 1
        assert settings.max_overflow == 0

    def test_pool_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_size=0)

    def test_pool_size_respects_upper_limit(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_size=101)

    def test_connection_string_hides_password(self):
        settings = DatabaseSettings(password=SecretStr("hunter2"))
        assert "hunter2" not in settings.connection_string

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CROPCO_DB_HOST", "platform-db")
        monkeypatch.setenv("CROPCO_DB_PORT", "6543")

        settings = DatabaseSettings()

        assert settings.host == "platform-db"
        assert settings.port == 6543


class TestTenantDatabaseSettings:
    """Tests for settings shared by tenant engines."""

    def test_defaults(self):
        settings = TenantDatabaseSettings()
        assert settings.pool_size == 5
        assert settings.database_prefix == "cropco_tenant_"

    def test_connect_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            TenantDatabaseSettings(connect_timeout_seconds=0)


class TestSecrets:
    """Secrets default to empty and never show in repr."""

    def test_cipher_key_defaults_to_empty(self, monkeypatch):
        monkeypatch.delenv("CROPCO_TENANT_ENCRYPTION_KEY", raising=False)
        assert CipherSettings().encryption_key.get_secret_value() == ""

    def test_cipher_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("CROPCO_TENANT_ENCRYPTION_KEY", "deployment-secret")

        settings = CipherSettings()

        assert settings.encryption_key.get_secret_value() == "deployment-secret"
        assert "deployment-secret" not in repr(settings)

    def test_jwt_secret_is_secret(self):
        settings = AuthSettings(jwt_secret=SecretStr("signing-secret"))
        assert "signing-secret" not in repr(settings)


class TestAuthSettings:
    """Tests for token and cookie settings."""

    @pytest.mark.parametrize("samesite", ["lax", "strict", "none"])
    def test_accepts_samesite_values(self, samesite):
        assert AuthSettings(cookie_samesite=samesite).cookie_samesite == samesite

    def test_rejects_unknown_samesite(self):
        with pytest.raises(ValidationError):
            AuthSettings(cookie_samesite="sometimes")

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError):
            AuthSettings(token_ttl_hours=0)


class TestCORSSettings:
    def test_disabled_without_origins(self):
        assert CORSSettings(origins=[]).is_enabled is False

    def test_enabled_with_origins(self):
        assert CORSSettings(origins=["https://app.cropco.co"]).is_enabled is True
