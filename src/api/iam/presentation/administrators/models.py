"""Pydantic models for administrator management requests and responses."""

from __future__ import annotations

import math

from pydantic import BaseModel, EmailStr, Field, field_validator

from iam.application.administrator_service import PasswordReset
from iam.domain.principals import Administrator, AdministratorRole


class CreateAdministratorRequest(BaseModel):
    """Request model for creating an administrator account."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., description="Login email of the account")
    password: str = Field(..., min_length=6, max_length=100)
    cell_phone_number: str | None = Field(default=None, max_length=10)
    role: AdministratorRole = AdministratorRole.USER

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: AdministratorRole) -> AdministratorRole:
        if value is AdministratorRole.MANAGER:
            raise ValueError("role must be one of: admin, user")
        return value


class UpdateAdministratorRequest(BaseModel):
    """Request model for changing account attributes. Omitted fields stay."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    cell_phone_number: str | None = Field(default=None, max_length=10)
    role: AdministratorRole | None = None


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1, max_length=100)
    new_password: str = Field(..., min_length=6, max_length=100)


class AdministratorResponse(BaseModel):
    """Response model for an administrator account. Never carries the hash."""

    id: str
    first_name: str
    last_name: str
    email: str
    cell_phone_number: str | None = None
    role: AdministratorRole
    is_active: bool

    @classmethod
    def from_domain(cls, administrator: Administrator) -> AdministratorResponse:
        return cls(
            id=administrator.id,
            first_name=administrator.first_name,
            last_name=administrator.last_name,
            email=administrator.email,
            cell_phone_number=administrator.cell_phone_number,
            role=administrator.role,
            is_active=administrator.is_active,
        )


class AdministratorListResponse(BaseModel):
    """One page of administrator accounts."""

    total_row_count: int
    current_row_count: int
    total_page_count: int
    current_page_count: int
    records: list[AdministratorResponse]

    @classmethod
    def from_page(
        cls,
        administrators: list[Administrator],
        total: int,
        limit: int,
        offset: int,
    ) -> AdministratorListResponse:
        return cls(
            total_row_count=total,
            current_row_count=len(administrators),
            total_page_count=math.ceil(total / limit) if limit else 0,
            current_page_count=(offset // limit) + 1 if limit else 0,
            records=[AdministratorResponse.from_domain(a) for a in administrators],
        )


class PasswordResetResponse(BaseModel):
    """A generated password, returned once."""

    password: str

    @classmethod
    def from_reset(cls, reset: PasswordReset) -> PasswordResetResponse:
        return cls(password=reset.password)
