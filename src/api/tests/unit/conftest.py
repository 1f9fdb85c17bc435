"""Unit test fixtures with mocked dependencies."""

import pytest

from infrastructure.settings import (
    get_auth_settings,
    get_cipher_settings,
    get_cors_settings,
    get_database_settings,
    get_settings,
    get_tenant_database_settings,
)

_SETTINGS_GETTERS = (
    get_settings,
    get_database_settings,
    get_tenant_database_settings,
    get_cipher_settings,
    get_auth_settings,
    get_cors_settings,
)


def _clear_settings_caches() -> None:
    for getter in _SETTINGS_GETTERS:
        getter.cache_clear()


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def settings_env(monkeypatch):
    """Configure deployment secrets through the environment.

    Settings getters are cached, so caches are cleared on the way in and
    out. Tests may set further variables with the returned monkeypatch.
    """
    monkeypatch.setenv("CROPCO_AUTH_JWT_SECRET", "unit-test-signing-secret")
    monkeypatch.setenv("CROPCO_TENANT_ENCRYPTION_KEY", "unit-test-encryption-key")
    _clear_settings_caches()
    yield monkeypatch
    _clear_settings_caches()
