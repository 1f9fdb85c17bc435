"""Principals: the authenticated actors of the system.

Principals are rebuilt from their stores on every request and never cached
across requests, so deactivations and permission revocations apply to the
very next request.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import ClassVar, TypeVar

from iam.domain.permissions import PermissionModule, flatten_permitted_endpoints


AD = TypeVar("AD", bound="Administrator")


class AdministratorRole(StrEnum):
    """Role of a platform or tenant administrator."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


@dataclass(frozen=True)
class TenantUser:
    """A user stored inside one tenant's own database.

    `permitted_endpoints` is the flattened projection of `modules`; it is
    filled by `with_permissions` during resolution.
    """

    id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    modules: tuple[PermissionModule, ...] = ()
    permitted_endpoints: frozenset[str] = field(default_factory=frozenset)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def with_permissions(self, modules: tuple[PermissionModule, ...]) -> TenantUser:
        """Return a copy carrying the given grants and their endpoint set."""
        return replace(
            self,
            modules=modules,
            permitted_endpoints=flatten_permitted_endpoints(modules),
        )


@dataclass(frozen=True)
class Administrator:
    """Shared shape of administrator principals (platform database).

    Accounts with the admin role are protected: other administrators can
    neither edit, remove, deactivate nor reset them.
    """

    kind: ClassVar[str] = "administrator"

    id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    role: AdministratorRole = AdministratorRole.ADMIN
    cell_phone_number: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_protected(self) -> bool:
        return self.role is AdministratorRole.ADMIN

    def with_status_toggled(self: AD) -> AD:
        return replace(self, is_active=not self.is_active)


class PlatformAdministrator(Administrator):
    """Operator of the whole platform (administrator-token cookie)."""


class TenantAdministrator(Administrator):
    """Operator of tenant management (x-tenant-token header)."""

    kind: ClassVar[str] = "tenant_administrator"
