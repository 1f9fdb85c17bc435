"""Administrator account management.

One service manages either administrator table; the repository and the
principal type it builds are chosen when the service is composed. Accounts
with the admin role are protected from every other administrator's edits.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Generic, TypeVar

from iam.application.observability import DefaultAdministratorServiceProbe
from iam.application.security import hash_password, verify_password
from iam.domain.principals import (
    AdministratorRole,
    PlatformAdministrator,
    TenantAdministrator,
)
from iam.ports.exceptions import (
    AdministratorNotFoundError,
    DuplicateAdministratorError,
    IncorrectPasswordError,
    ProtectedAdministratorActionForbiddenError,
    ProtectedAdministratorError,
)
from shared_kernel.passwords import generate_random_secret

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from iam.application.observability import AdministratorServiceProbe
    from iam.ports.repositories import IAdministratorManagementRepository


A = TypeVar("A", PlatformAdministrator, TenantAdministrator)


@dataclass(frozen=True)
class PasswordReset:
    """A generated password; the one time its plaintext leaves the process."""

    administrator_id: str
    password: str


class AdministratorService(Generic[A]):
    """Application service for administrator accounts of one kind."""

    def __init__(
        self,
        repository: IAdministratorManagementRepository[A],
        session: AsyncSession,
        principal: type[A],
        probe: AdministratorServiceProbe | None = None,
    ):
        """Initialize AdministratorService with dependencies.

        Args:
            repository: Accounts of the managed kind
            session: Platform database session for transaction management
            principal: Principal type built for new accounts
            probe: Optional domain probe for observability
        """
        self._repository = repository
        self._session = session
        self._principal = principal
        self._kind = principal.kind
        self._probe = probe or DefaultAdministratorServiceProbe()

    async def create_administrator(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: AdministratorRole = AdministratorRole.USER,
        cell_phone_number: str | None = None,
    ) -> A:
        """Create an account with a hashed password.

        Raises:
            DuplicateAdministratorError: If the email is taken
        """
        administrator = self._principal(
            id=str(uuid.uuid4()),
            email=email.strip().lower(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            is_active=True,
            role=role,
            cell_phone_number=cell_phone_number,
        )
        password_hash = await asyncio.to_thread(hash_password, password)

        async with self._session.begin():
            await self._ensure_email_available(administrator.email)
            await self._repository.save(administrator, password_hash=password_hash)

        self._probe.administrator_created(
            kind=self._kind, administrator_id=administrator.id
        )
        return administrator

    async def list_administrators(
        self,
        query: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[A], int]:
        """List one page of accounts and the total number of matches."""
        administrators, total = await self._repository.list_administrators(
            query=query.strip() if query else None,
            limit=limit,
            offset=offset,
        )
        self._probe.administrators_listed(
            kind=self._kind, count=len(administrators), total=total
        )
        return administrators, total

    async def get_administrator(self, administrator_id: str) -> A:
        """Retrieve an account by id.

        Raises:
            AdministratorNotFoundError: If no live account has this id
        """
        return await self._load(administrator_id)

    async def update_administrator(
        self,
        administrator_id: str,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        cell_phone_number: str | None = None,
        role: AdministratorRole | None = None,
    ) -> A:
        """Change account attributes. Omitted arguments are left untouched.

        Raises:
            AdministratorNotFoundError: If the account does not exist
            ProtectedAdministratorError: If the account has the admin role
            DuplicateAdministratorError: If the new email is taken
        """
        async with self._session.begin():
            administrator = await self._load(administrator_id)
            self._guard(
                administrator,
                operation="update",
                error=ProtectedAdministratorError(
                    "Admin cannot be updated", administrator.id
                ),
            )
            changes: dict[str, object] = {}
            if email is not None:
                normalized = email.strip().lower()
                if normalized != administrator.email:
                    await self._ensure_email_available(normalized)
                    changes["email"] = normalized
            if first_name is not None:
                changes["first_name"] = first_name.strip()
            if last_name is not None:
                changes["last_name"] = last_name.strip()
            if cell_phone_number is not None:
                changes["cell_phone_number"] = cell_phone_number
            if role is not None:
                changes["role"] = role
            administrator = replace(administrator, **changes)
            await self._repository.save(administrator)

        self._probe.administrator_updated(
            kind=self._kind, administrator_id=administrator.id, fields=list(changes)
        )
        return administrator

    async def remove_administrator(self, administrator_id: str) -> None:
        """Tombstone an account.

        Raises:
            AdministratorNotFoundError: If the account does not exist
            ProtectedAdministratorError: If the account has the admin role
        """
        async with self._session.begin():
            administrator = await self._load(administrator_id)
            self._guard(
                administrator,
                operation="remove",
                error=ProtectedAdministratorError(
                    "Admin cannot be deleted", administrator.id
                ),
            )
            await self._repository.soft_delete(administrator.id)

        self._probe.administrator_removed(
            kind=self._kind, administrator_id=administrator.id
        )

    async def toggle_status(self, administrator_id: str) -> A:
        """Activate or deactivate an account.

        A deactivated administrator is rejected on their next request.

        Raises:
            ProtectedAdministratorActionForbiddenError: If the account has the
                admin role
        """
        async with self._session.begin():
            administrator = await self._load(administrator_id)
            self._guard(
                administrator,
                operation="toggle_status",
                error=ProtectedAdministratorActionForbiddenError(
                    "You cannot change the status of an admin user",
                    administrator.id,
                ),
            )
            administrator = administrator.with_status_toggled()
            await self._repository.save(administrator)

        self._probe.administrator_status_changed(
            kind=self._kind,
            administrator_id=administrator.id,
            is_active=administrator.is_active,
        )
        return administrator

    async def reset_password(self, administrator_id: str) -> PasswordReset:
        """Replace an account's password with a generated one.

        Raises:
            ProtectedAdministratorActionForbiddenError: If the account has the
                admin role
        """
        password = generate_random_secret()
        password_hash = await asyncio.to_thread(hash_password, password)

        async with self._session.begin():
            administrator = await self._load(administrator_id)
            self._guard(
                administrator,
                operation="reset_password",
                error=ProtectedAdministratorActionForbiddenError(
                    "You cannot reset the password of an admin user",
                    administrator.id,
                ),
            )
            await self._repository.set_password(administrator.id, password_hash)

        self._probe.password_reset(kind=self._kind, administrator_id=administrator.id)
        return PasswordReset(administrator_id=administrator.id, password=password)

    async def change_password(
        self, administrator_id: str, old_password: str, new_password: str
    ) -> None:
        """Change the caller's own password after checking the old one.

        Raises:
            AdministratorNotFoundError: If the account no longer exists
            IncorrectPasswordError: If the old password does not match
        """
        async with self._session.begin():
            administrator = await self._load(administrator_id)
            current_hash = await self._repository.get_password_hash(administrator.id)
            matches = await asyncio.to_thread(
                verify_password, old_password, current_hash
            )
            if not matches:
                self._probe.password_change_rejected(
                    kind=self._kind, administrator_id=administrator.id
                )
                raise IncorrectPasswordError()
            new_hash = await asyncio.to_thread(hash_password, new_password)
            await self._repository.set_password(administrator.id, new_hash)

        self._probe.password_changed(kind=self._kind, administrator_id=administrator.id)

    def _guard(
        self, administrator: A, operation: str, error: ProtectedAdministratorError
    ) -> None:
        if administrator.is_protected:
            self._probe.protected_administrator_rejected(
                kind=self._kind, administrator_id=administrator.id, operation=operation
            )
            raise error

    async def _ensure_email_available(self, email: str) -> None:
        if await self._repository.get_by_email(email) is not None:
            self._probe.duplicate_administrator(kind=self._kind)
            raise DuplicateAdministratorError(f"Email '{email}' is already taken")

    async def _load(self, administrator_id: str) -> A:
        administrator = await self._repository.get_by_id(administrator_id)
        if administrator is None:
            self._probe.administrator_not_found(
                kind=self._kind, administrator_ref=administrator_id
            )
            raise AdministratorNotFoundError(administrator_id)
        return administrator
