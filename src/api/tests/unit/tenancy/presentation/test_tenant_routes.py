"""Unit tests for the tenant administration routes.

The tenant service is mocked; platform administrators are resolved from
an in-memory store with real tokens.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from iam.application.resolvers import PlatformAdministratorResolver
from iam.dependencies.authentication import get_platform_administrator_resolver
from iam.domain.principals import PlatformAdministrator
from iam.presentation import register_iam_exception_handlers
from infrastructure.dependencies import get_request_context
from main import request_validation_handler
from shared_kernel.auth import TokenService
from shared_kernel.middleware import RequestContext
from tenancy.application.tenant_service import DatabaseReconfiguration, TenantService
from tenancy.dependencies import get_tenant_service
from tenancy.domain import ConnectionConfig, Tenant, TenantDatabase, TenantId
from tenancy.ports.exceptions import (
    DuplicateTenantError,
    InvalidTenantDatabaseConfigError,
    TenantDisabledError,
    TenantNotFoundError,
)
from tenancy.presentation import register_tenancy_exception_handlers, router
from tests.unit.iam.fakes import (
    ADMIN_ID,
    FakeAdministratorRepository,
    administrator_repository_opener,
    make_administrator,
)
from tests.unit.tenancy.fakes import TENANT_A


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret="tenant-routes-secret")


@pytest.fixture
def mock_tenant_service() -> AsyncMock:
    """Mock TenantService for testing."""
    return AsyncMock(spec=TenantService)


@pytest.fixture
def client(token_service: TokenService, mock_tenant_service: AsyncMock) -> TestClient:
    """Create TestClient with mocked dependencies."""
    administrators = administrator_repository_opener(
        FakeAdministratorRepository([make_administrator(PlatformAdministrator)])
    )

    app = FastAPI()
    register_tenancy_exception_handlers(app)
    register_iam_exception_handlers(app)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router)

    app.dependency_overrides[get_tenant_service] = lambda: mock_tenant_service
    app.dependency_overrides[get_request_context] = lambda: RequestContext()
    app.dependency_overrides[get_platform_administrator_resolver] = (
        lambda: PlatformAdministratorResolver(token_service, administrators)
    )
    return TestClient(app)


@pytest.fixture
def admin_headers(token_service: TokenService) -> dict[str, str]:
    return {"Cookie": f"administrator-token={token_service.issue(ADMIN_ID)}"}


def _tenant(**overrides) -> Tenant:
    fields = {
        "id": TenantId(value=TENANT_A),
        "company_name": "Finca La Esperanza",
        "email": "admin@esperanza.co",
        "subdomain": "esperanza",
    }
    fields.update(overrides)
    return Tenant(**fields)


class TestAuthentication:
    def test_requires_administrator(self, client: TestClient):
        response = client.get(f"/tenants/one/{TENANT_A}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_user_cookie_is_not_accepted(
        self, client: TestClient, token_service: TokenService
    ):
        response = client.get(
            f"/tenants/one/{TENANT_A}",
            headers={"Cookie": f"user-token={token_service.issue(ADMIN_ID)}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_subdomain_lookup_is_public(
        self, client: TestClient, mock_tenant_service: AsyncMock
    ):
        mock_tenant_service.find_by_subdomain.return_value = _tenant()

        response = client.get(
            "/tenants/one/find/subdomain", params={"subdomain": "esperanza"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "id": TENANT_A,
            "subdomain": "esperanza",
            "company_name": "Finca La Esperanza",
        }


class TestCreateTenant:
    """Tests for POST /tenants/create."""

    def test_creates_tenant(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.create_tenant.return_value = _tenant()

        response = client.post(
            "/tenants/create",
            headers=admin_headers,
            json={
                "company_name": "Finca La Esperanza",
                "email": "admin@esperanza.co",
                "subdomain": "Esperanza",
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"] == TENANT_A
        kwargs = mock_tenant_service.create_tenant.call_args.kwargs
        assert kwargs["subdomain"] == "esperanza"

    def test_invalid_subdomain_is_bad_request(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        response = client.post(
            "/tenants/create",
            headers=admin_headers,
            json={
                "company_name": "Finca",
                "email": "admin@esperanza.co",
                "subdomain": "not a label",
            },
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_tenant_service.create_tenant.assert_not_awaited()

    def test_duplicate_is_conflict(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.create_tenant.side_effect = DuplicateTenantError(
            "Subdomain 'esperanza' is already taken"
        )

        response = client.post(
            "/tenants/create",
            headers=admin_headers,
            json={
                "company_name": "Finca",
                "email": "admin@esperanza.co",
                "subdomain": "esperanza",
            },
        )

        assert response.status_code == status.HTTP_409_CONFLICT


class TestReadTenants:
    def test_list_reports_pages(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.list_tenants.return_value = ([_tenant()], 21)

        response = client.get(
            "/tenants/all",
            headers=admin_headers,
            params={"limit": 10, "offset": 10},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["total_row_count"] == 21
        assert body["current_row_count"] == 1
        assert body["total_page_count"] == 3
        assert body["current_page_count"] == 2

    def test_limit_is_bounded(self, client: TestClient, admin_headers):
        response = client.get(
            "/tenants/all", headers=admin_headers, params={"limit": 1000}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_tenant_is_not_found(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.get_tenant.side_effect = TenantNotFoundError(TENANT_A)

        response = client.get(f"/tenants/one/{TENANT_A}", headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_inactive_subdomain_is_forbidden(
        self, client: TestClient, mock_tenant_service: AsyncMock
    ):
        mock_tenant_service.find_by_subdomain.side_effect = TenantDisabledError(
            TENANT_A
        )

        response = client.get(
            "/tenants/one/find/subdomain", params={"subdomain": "esperanza"}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestModifyTenants:
    def test_toggle_status(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.toggle_status.return_value = _tenant(is_active=False)

        response = client.patch(
            f"/tenants/toggle-status/one/{TENANT_A}", headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_active"] is False

    def test_remove(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        response = client.delete(f"/tenants/remove/one/{TENANT_A}", headers=admin_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        mock_tenant_service.remove_tenant.assert_awaited_once_with(TENANT_A)

    def test_update_passes_only_given_fields(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.update_tenant.return_value = _tenant(company_name="Nueva")

        response = client.put(
            f"/tenants/update/one/{TENANT_A}",
            headers=admin_headers,
            json={"company_name": "Nueva"},
        )

        assert response.status_code == status.HTTP_200_OK
        mock_tenant_service.update_tenant.assert_awaited_once_with(
            TENANT_A,
            company_name="Nueva",
            email=None,
            subdomain=None,
            cell_phone_number=None,
        )


class TestConfigureDatabase:
    """Tests for PUT /tenants/database/one/{tenant_id}."""

    def test_never_returns_stored_password(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.reconfigure_database.return_value = (
            DatabaseReconfiguration(
                database=TenantDatabase(
                    id="db-1",
                    tenant_id=TENANT_A,
                    database_name="esperanza_db",
                    connection_config=ConnectionConfig(
                        host="db.internal",
                        port=5432,
                        username="esperanza",
                        password="sealed-token",
                    ),
                ),
                generated_password="once-only",
            )
        )

        response = client.put(
            f"/tenants/database/one/{TENANT_A}",
            headers=admin_headers,
            json={
                "database_name": "esperanza_db",
                "host": "db.internal",
                "username": "esperanza",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["generated_password"] == "once-only"
        assert "sealed-token" not in response.text
        assert mock_tenant_service.reconfigure_database.call_args.kwargs["port"] == 5432

    def test_invalid_configuration_is_bad_request(
        self, client: TestClient, mock_tenant_service: AsyncMock, admin_headers
    ):
        mock_tenant_service.reconfigure_database.side_effect = (
            InvalidTenantDatabaseConfigError("host must not be empty")
        )

        response = client.put(
            f"/tenants/database/one/{TENANT_A}",
            headers=admin_headers,
            json={"database_name": "db", "host": "h", "username": "u"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"detail": "host must not be empty"}
