"""Pydantic models for login and session endpoints."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from iam.domain.permissions import PermissionModule
from iam.domain.principals import Administrator, AdministratorRole, TenantUser


class LoginRequest(BaseModel):
    """Email/password pair submitted on every login channel."""

    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, max_length=100, description="Password")


class ModuleActionResponse(BaseModel):
    """One granted action."""

    name: str
    path_endpoint: str
    description: str = ""


class PermissionModuleResponse(BaseModel):
    """A module and the actions granted in it."""

    name: str
    actions: list[ModuleActionResponse]

    @classmethod
    def from_domain(cls, module: PermissionModule) -> PermissionModuleResponse:
        return cls(
            name=module.name,
            actions=[
                ModuleActionResponse(
                    name=action.name,
                    path_endpoint=action.path_endpoint,
                    description=action.description,
                )
                for action in module.actions
            ],
        )


class UserSessionResponse(BaseModel):
    """A tenant user and the grants it currently holds."""

    id: str
    email: str
    first_name: str
    last_name: str
    modules: list[PermissionModuleResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, user: TenantUser) -> UserSessionResponse:
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            modules=[PermissionModuleResponse.from_domain(m) for m in user.modules],
        )


class AdministratorSessionResponse(BaseModel):
    """A platform or tenant administrator.

    `token` is only set on the x-tenant-token channel, whose token travels
    in a header chosen by the client instead of a cookie.
    """

    id: str
    email: str
    first_name: str
    last_name: str
    role: AdministratorRole
    token: str | None = None

    @classmethod
    def from_domain(
        cls, administrator: Administrator, token: str | None = None
    ) -> AdministratorSessionResponse:
        return cls(
            id=administrator.id,
            email=administrator.email,
            first_name=administrator.first_name,
            last_name=administrator.last_name,
            role=administrator.role,
            token=token,
        )


class LogoutResponse(BaseModel):
    message: str = "Logout successful"
