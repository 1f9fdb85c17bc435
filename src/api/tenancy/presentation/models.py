"""Pydantic models for tenant administration requests and responses."""

from __future__ import annotations

import math

from pydantic import BaseModel, EmailStr, Field, field_validator

from tenancy.application.tenant_service import DatabaseReconfiguration
from tenancy.domain import Tenant
from tenancy.domain.tenant import normalize_subdomain


class CreateTenantRequest(BaseModel):
    """Request model for creating a tenant."""

    company_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., description="Contact email of the tenant")
    subdomain: str = Field(..., description="DNS label the tenant is served under")
    cell_phone_number: str | None = Field(default=None, max_length=10)

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, value: str) -> str:
        return normalize_subdomain(value)


class UpdateTenantRequest(BaseModel):
    """Request model for changing tenant attributes. Omitted fields stay."""

    company_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    subdomain: str | None = None
    cell_phone_number: str | None = Field(default=None, max_length=10)

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, value: str | None) -> str | None:
        return normalize_subdomain(value) if value is not None else None


class ConfigureTenantDatabaseRequest(BaseModel):
    """New coordinates and credentials of a tenant database.

    Without a password one is generated and returned once.
    """

    database_name: str = Field(..., min_length=1, max_length=63)
    host: str = Field(..., min_length=1, max_length=255)
    port: int = Field(default=5432)
    username: str = Field(..., min_length=1, max_length=63)
    password: str | None = Field(default=None, min_length=1, max_length=100)


class TenantResponse(BaseModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID (UUID)")
    company_name: str
    email: str
    subdomain: str
    cell_phone_number: str | None = None
    is_created_db: bool
    is_active: bool

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response."""
        return cls(
            id=tenant.id.value,
            company_name=tenant.company_name,
            email=tenant.email,
            subdomain=tenant.subdomain,
            cell_phone_number=tenant.cell_phone_number,
            is_created_db=tenant.is_created_db,
            is_active=tenant.is_active,
        )


class TenantSubdomainResponse(BaseModel):
    """Public projection of a tenant used by the login page."""

    id: str
    subdomain: str
    company_name: str

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantSubdomainResponse:
        return cls(
            id=tenant.id.value,
            subdomain=tenant.subdomain,
            company_name=tenant.company_name,
        )


class TenantListResponse(BaseModel):
    """One page of tenants."""

    total_row_count: int
    current_row_count: int
    total_page_count: int
    current_page_count: int
    records: list[TenantResponse]

    @classmethod
    def from_page(
        cls, tenants: list[Tenant], total: int, limit: int, offset: int
    ) -> TenantListResponse:
        return cls(
            total_row_count=total,
            current_row_count=len(tenants),
            total_page_count=math.ceil(total / limit) if limit else 0,
            current_page_count=(offset // limit) + 1 if limit else 0,
            records=[TenantResponse.from_domain(tenant) for tenant in tenants],
        )


class TenantDatabaseResponse(BaseModel):
    """Stored database coordinates of a tenant. Never carries the stored password."""

    tenant_id: str
    database_name: str
    host: str
    port: int
    username: str | None
    generated_password: str | None = Field(
        default=None,
        description="Set once, when the password was generated by the server",
    )

    @classmethod
    def from_reconfiguration(
        cls, result: DatabaseReconfiguration
    ) -> TenantDatabaseResponse:
        config = result.database.connection_config
        assert config is not None
        return cls(
            tenant_id=result.database.tenant_id,
            database_name=result.database.database_name,
            host=config.host,
            port=config.port,
            username=config.username,
            generated_password=result.generated_password,
        )
