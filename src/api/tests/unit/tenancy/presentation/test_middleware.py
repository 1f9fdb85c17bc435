"""Unit tests for TenantResolutionMiddleware.

A real registry runs over in-memory stand-ins, so the tests observe what
a handler downstream of the middleware receives.
"""

from __future__ import annotations

from typing import Annotated

import pytest
import structlog
from fastapi import Depends, FastAPI, status
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from infrastructure.dependencies import get_request_context
from shared_kernel.middleware import RequestContext
from tenancy.application.connection_registry import TenantConnectionRegistry
from tenancy.presentation import (
    TenantResolutionMiddleware,
    register_tenancy_exception_handlers,
)
from tenancy.ports.exceptions import CredentialIntegrityError
from tests.unit.tenancy.fakes import (
    TENANT_A,
    FakeConnector,
    FakeDirectory,
    make_database,
    unreachable_directory_opener,
)


@pytest.fixture
def app(registry: TenantConnectionRegistry) -> FastAPI:
    app = FastAPI()
    app.state.connection_registry = registry
    app.add_middleware(TenantResolutionMiddleware)
    register_tenancy_exception_handlers(app)

    @app.get("/context")
    async def read_context(
        context: Annotated[RequestContext, Depends(get_request_context)],
    ) -> dict:
        return {
            "tenant_id": context.tenant_id,
            "connected": context.has_tenant_connection,
            "failure": type(context.tenant_failure).__name__
            if context.tenant_failure
            else None,
            "bound": structlog.contextvars.get_contextvars().get("tenant_id"),
        }

    @app.get("/tenant-data")
    async def read_tenant_data(
        context: Annotated[RequestContext, Depends(get_request_context)],
    ) -> dict:
        context.require_tenant_connection()
        return {"ok": True}

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestResolution:
    """What handlers see after the middleware ran."""

    def test_without_header(self, client: TestClient, directory: FakeDirectory):
        response = client.get("/context")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "tenant_id": None,
            "connected": False,
            "failure": None,
            "bound": None,
        }
        assert directory.lookups == []

    def test_resolved_tenant(self, client: TestClient, connector: FakeConnector):
        response = client.get("/context", headers={"x-tenant-id": TENANT_A})

        assert response.json() == {
            "tenant_id": TENANT_A,
            "connected": True,
            "failure": None,
            "bound": TENANT_A,
        }
        assert len(connector.calls) == 1

    def test_connection_reused_across_requests(
        self, client: TestClient, connector: FakeConnector
    ):
        client.get("/context", headers={"x-tenant-id": TENANT_A})
        client.get("/context", headers={"x-tenant-id": TENANT_A})

        assert len(connector.calls) == 1

    def test_unknown_tenant_does_not_fail_request(
        self, client: TestClient, directory: FakeDirectory
    ):
        directory.databases.clear()

        response = client.get("/context", headers={"x-tenant-id": TENANT_A})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["failure"] == "TenantDatabaseNotFoundError"

    def test_request_id_is_echoed(self, client: TestClient):
        response = client.get("/context", headers={"x-request-id": "req-123"})

        assert response.headers["x-request-id"] == "req-123"

    def test_request_id_is_generated(self, client: TestClient):
        response = client.get("/context")

        assert response.headers["x-request-id"]


class TestFailureSurfacesAtUse:
    """The handler that needs tenant data reports the stored failure."""

    def test_missing_header(self, client: TestClient):
        response = client.get("/tenant-data")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_malformed_tenant_id(self, client: TestClient):
        response = client.get("/tenant-data", headers={"x-tenant-id": "tenant-1"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_disabled_tenant(self, client: TestClient, directory: FakeDirectory):
        directory.databases[TENANT_A] = make_database(TENANT_A, active=False)

        response = client.get("/tenant-data", headers={"x-tenant-id": TENANT_A})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unreachable_database(self, client: TestClient, connector: FakeConnector):
        connector.failures = 1

        response = client.get("/tenant-data", headers={"x-tenant-id": TENANT_A})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert "tenant-db" not in response.text

    def test_undecryptable_password(self, client: TestClient, cipher):
        cipher.decrypt.side_effect = CredentialIntegrityError("tampered")

        response = client.get("/tenant-data", headers={"x-tenant-id": TENANT_A})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "The server is not configured correctly"}

    def test_resolved_tenant(self, client: TestClient):
        response = client.get("/tenant-data", headers={"x-tenant-id": TENANT_A})

        assert response.status_code == status.HTTP_200_OK


class TestPlatformDirectoryUnavailable:
    """A platform database outage is deferred like any tenant failure."""

    @pytest.fixture
    def client(self, app: FastAPI, cipher, connector: FakeConnector) -> TestClient:
        app.state.connection_registry = TenantConnectionRegistry(
            open_directory=unreachable_directory_opener(
                OperationalError("SELECT 1", {}, OSError("Connection refused"))
            ),
            cipher=cipher,
            connector=connector,
        )
        return TestClient(app)

    def test_request_not_needing_tenant_succeeds(self, client: TestClient):
        response = client.get("/context", headers={"x-tenant-id": TENANT_A})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["failure"] == "DatabaseConnectionError"

    def test_tenant_data_is_unavailable(
        self, client: TestClient, connector: FakeConnector
    ):
        response = client.get("/tenant-data", headers={"x-tenant-id": TENANT_A})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert "Connection refused" not in response.text
        assert connector.calls == []
