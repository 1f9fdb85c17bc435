"""HTTP routes for tenant administration.

Every route requires a platform administrator except the subdomain lookup,
which the public login page uses to find the tenant id it must send in
`x-tenant-id`.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from iam.dependencies.principal import require_administrator
from shared_kernel.middleware import RequestContext
from tenancy.application.tenant_service import TenantService
from tenancy.dependencies import get_tenant_service
from tenancy.presentation.models import (
    ConfigureTenantDatabaseRequest,
    CreateTenantRequest,
    TenantDatabaseResponse,
    TenantListResponse,
    TenantResponse,
    TenantSubdomainResponse,
    UpdateTenantRequest,
)

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)

AdministratorContext = Annotated[RequestContext, Depends(require_administrator())]
Service = Annotated[TenantService, Depends(get_tenant_service)]


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_tenant(
    request: CreateTenantRequest,
    _: AdministratorContext,
    service: Service,
) -> TenantResponse:
    """Create a tenant and its database record (not configured yet).

    Raises:
        DuplicateTenantError: 409 if the subdomain is taken
    """
    tenant = await service.create_tenant(
        company_name=request.company_name,
        email=request.email,
        subdomain=request.subdomain,
        cell_phone_number=request.cell_phone_number,
    )
    return TenantResponse.from_domain(tenant)


@router.get("/all")
async def list_tenants(
    _: AdministratorContext,
    service: Service,
    query: Annotated[str | None, Query(max_length=100)] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> TenantListResponse:
    tenants, total = await service.list_tenants(query=query, limit=limit, offset=offset)
    return TenantListResponse.from_page(tenants, total, limit=limit, offset=offset)


@router.get("/one/find/subdomain")
async def find_tenant_by_subdomain(
    service: Service,
    subdomain: Annotated[str, Query(min_length=1, max_length=63)],
) -> TenantSubdomainResponse:
    """Map a subdomain to an active tenant. Does not require authentication."""
    tenant = await service.find_by_subdomain(subdomain)
    return TenantSubdomainResponse.from_domain(tenant)


@router.get("/one/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    _: AdministratorContext,
    service: Service,
) -> TenantResponse:
    tenant = await service.get_tenant(tenant_id)
    return TenantResponse.from_domain(tenant)


@router.put("/update/one/{tenant_id}")
async def update_tenant(
    tenant_id: str,
    request: UpdateTenantRequest,
    _: AdministratorContext,
    service: Service,
) -> TenantResponse:
    tenant = await service.update_tenant(
        tenant_id,
        company_name=request.company_name,
        email=request.email,
        subdomain=request.subdomain,
        cell_phone_number=request.cell_phone_number,
    )
    return TenantResponse.from_domain(tenant)


@router.patch("/toggle-status/one/{tenant_id}")
async def toggle_tenant_status(
    tenant_id: str,
    _: AdministratorContext,
    service: Service,
) -> TenantResponse:
    """Activate or deactivate a tenant; its cached connection is closed."""
    tenant = await service.toggle_status(tenant_id)
    return TenantResponse.from_domain(tenant)


@router.delete("/remove/one/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_tenant(
    tenant_id: str,
    _: AdministratorContext,
    service: Service,
) -> None:
    await service.remove_tenant(tenant_id)


@router.put("/database/one/{tenant_id}")
async def configure_tenant_database(
    tenant_id: str,
    request: ConfigureTenantDatabaseRequest,
    _: AdministratorContext,
    service: Service,
) -> TenantDatabaseResponse:
    """Point a tenant at new database coordinates and credentials.

    The password is stored encrypted. When omitted, a generated password is
    returned in this response only, for provisioning the database role.
    """
    result = await service.reconfigure_database(
        tenant_id,
        database_name=request.database_name,
        host=request.host,
        port=request.port,
        username=request.username,
        password=request.password,
    )
    return TenantDatabaseResponse.from_reconfiguration(result)
