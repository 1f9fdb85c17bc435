"""Unit tests for the main FastAPI application.

Covers the lifespan (registry ownership, startup secret checks, shutdown
cleanup), the health endpoints and the 400 mapping of malformed input.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from asgi_lifespan import LifespanManager
from fastapi.testclient import TestClient

from iam.dependencies.authentication import get_login_service
from infrastructure.database.dependencies import get_platform_engine
from infrastructure.settings import get_auth_settings, get_cipher_settings
from infrastructure.version import __version__
from main import create_app


@pytest.fixture
def registry() -> MagicMock:
    """Stand-in connection registry holding two cached connections."""
    registry = MagicMock()
    registry.__len__.return_value = 2
    registry.evict_all = AsyncMock(return_value=2)
    return registry


@pytest.fixture
def client(settings_env, registry) -> TestClient:
    """Client for the real app with the lifespan skipped."""
    app = create_app()
    app.state.connection_registry = registry
    return TestClient(app)


class TestLifespan:
    """Tests for cropco_lifespan."""

    @pytest.mark.asyncio
    async def test_registry_is_owned_and_closed_by_the_app(self, settings_env, registry):
        """Startup publishes the registry; shutdown evicts every connection."""
        app = create_app()
        close = AsyncMock()

        with (
            patch("main.build_connection_registry", return_value=registry),
            patch("main.close_database_connections", close),
            patch("main.configure_logging"),
        ):
            async with LifespanManager(app):
                assert app.state.connection_registry is registry
                registry.evict_all.assert_not_awaited()

        registry.evict_all.assert_awaited_once()
        close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_startup_and_shutdown_are_reported(self, settings_env, registry):
        app = create_app()
        probe = MagicMock()

        with (
            patch("main.build_connection_registry", return_value=registry),
            patch("main.close_database_connections", AsyncMock()),
            patch("main.configure_logging"),
            patch("main.DefaultStartupProbe", return_value=probe),
        ):
            async with LifespanManager(app):
                probe.application_started.assert_called_once_with(version=__version__)

        probe.application_stopping.assert_called_once_with(cached_tenant_connections=2)
        probe.secret_not_configured.assert_not_called()

    @pytest.mark.asyncio
    async def test_unset_secrets_are_reported_at_startup(self, settings_env, registry):
        """Empty secrets do not stop startup but are flagged by variable name."""
        settings_env.setenv("CROPCO_AUTH_JWT_SECRET", "")
        settings_env.setenv("CROPCO_TENANT_ENCRYPTION_KEY", "")
        get_auth_settings.cache_clear()
        get_cipher_settings.cache_clear()
        app = create_app()
        probe = MagicMock()

        with (
            patch("main.build_connection_registry", return_value=registry),
            patch("main.close_database_connections", AsyncMock()),
            patch("main.configure_logging"),
            patch("main.DefaultStartupProbe", return_value=probe),
        ):
            async with LifespanManager(app):
                pass

        reported = {c.args[0] for c in probe.secret_not_configured.call_args_list}
        assert reported == {"CROPCO_AUTH_JWT_SECRET", "CROPCO_TENANT_ENCRYPTION_KEY"}


class TestHealth:
    """Tests for /health and /health/db."""

    def test_health_reports_cached_connections(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "version": __version__,
            "cached_tenant_connections": 2,
        }

    def test_health_echoes_request_id(self, client):
        response = client.get("/health", headers={"x-request-id": "req-42"})

        assert response.headers["x-request-id"] == "req-42"

    def test_health_db_connected(self, client):
        connection = MagicMock()
        connection.execute = AsyncMock()
        engine = MagicMock()
        engine.connect.return_value.__aenter__.return_value = connection
        client.app.dependency_overrides[get_platform_engine] = lambda: engine

        response = client.get("/health/db")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "connected": True}
        connection.execute.assert_awaited_once()

    def test_health_db_unreachable_returns_503(self, client):
        engine = MagicMock()
        engine.connect.side_effect = OSError("connection refused")
        client.app.dependency_overrides[get_platform_engine] = lambda: engine
        probe = MagicMock()

        with patch("main.DefaultConnectionProbe", return_value=probe):
            response = client.get("/health/db")

        assert response.status_code == 503
        assert response.json() == {"status": "unhealthy", "connected": False}
        probe.health_check_failed.assert_called_once()


class TestRequestValidation:
    """Malformed input is answered with 400 rather than 422."""

    def test_invalid_body_returns_400(self, client):
        client.app.dependency_overrides[get_login_service] = lambda: MagicMock()

        response = client.post(
            "/auth/administrator/login", json={"email": "not-an-email"}
        )

        assert response.status_code == 400
        assert isinstance(response.json()["detail"], list)

    def test_malformed_tenant_header_does_not_fail_public_route(self, client):
        """Tenant failures only surface where a tenant connection is used."""
        response = client.get("/health", headers={"x-tenant-id": "not-a-uuid"})

        assert response.status_code == 200
