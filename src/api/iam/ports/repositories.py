"""Repository protocols (ports) for the IAM bounded context.

Tenant users live in each tenant's own database, so their repository is
always bound to one tenant connection. Administrators live in the platform
database.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

from iam.domain.permissions import PermissionModule
from iam.domain.principals import Administrator, TenantUser

A = TypeVar("A", bound=Administrator, covariant=True)


@runtime_checkable
class ITenantUserRepository(Protocol):
    """Users and their grants inside one tenant database."""

    async def get_by_id(self, user_id: str) -> TenantUser | None:
        """Retrieve a user by id (tombstoned users are absent)."""
        ...

    async def get_by_email(self, email: str) -> tuple[TenantUser, str] | None:
        """Retrieve a user and its password hash by email, for login."""
        ...

    async def list_permission_modules(
        self, user_id: str
    ) -> tuple[PermissionModule, ...]:
        """Load the modules and actions currently granted to a user."""
        ...


@runtime_checkable
class IAdministratorRepository(Protocol[A]):
    """Administrator accounts in the platform database."""

    async def get_by_id(self, administrator_id: str) -> A | None:
        """Retrieve an administrator by id (tombstoned accounts are absent)."""
        ...

    async def get_by_email(self, email: str) -> tuple[A, str] | None:
        """Retrieve an administrator and its password hash by email."""
        ...


AM = TypeVar("AM", bound=Administrator)


@runtime_checkable
class IAdministratorManagementRepository(IAdministratorRepository[AM], Protocol[AM]):
    """Administrator accounts, with the writes used by account management."""

    async def list_administrators(
        self, query: str | None, limit: int, offset: int
    ) -> tuple[list[AM], int]:
        """Return one page of accounts and the total number of matches.

        `query` matches the start of the first name, last name or email.
        """
        ...

    async def get_password_hash(self, administrator_id: str) -> str | None:
        ...

    async def save(self, administrator: AM, password_hash: str | None = None) -> None:
        """Insert or update an account.

        A new account requires `password_hash`; on update it is optional.

        Raises:
            DuplicateAdministratorError: If the email is already taken
        """
        ...

    async def set_password(self, administrator_id: str, password_hash: str) -> None:
        ...

    async def soft_delete(self, administrator_id: str) -> None:
        """Tombstone an account. No-op when it does not exist."""
        ...
