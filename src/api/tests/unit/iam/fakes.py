"""In-memory principal stores for resolver, login and route tests."""

from __future__ import annotations

from contextlib import asynccontextmanager

from iam.application.security import hash_password
from iam.domain.permissions import ModuleAction, PermissionModule
from iam.domain.principals import (
    Administrator,
    AdministratorRole,
    PlatformAdministrator,
    TenantAdministrator,
    TenantUser,
)

PASSWORD = "correct horse battery staple"
PASSWORD_HASH = hash_password(PASSWORD)

USER_ID = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"
ADMIN_ID = "bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb"
MANAGED_ID = "cccccccc-cccc-4ccc-8ccc-cccccccccccc"

CROPS = PermissionModule(
    name="crops",
    actions=(
        ModuleAction(name="find_all_crops", path_endpoint="/crops/all"),
        ModuleAction(name="find_one_crop", path_endpoint="/crops/one/:id"),
    ),
)


def make_user(
    user_id: str = USER_ID,
    *,
    email: str = "ana@finca.co",
    first_name: str = "Ana",
    is_active: bool = True,
) -> TenantUser:
    return TenantUser(
        id=user_id,
        email=email,
        first_name=first_name,
        last_name="Gomez",
        is_active=is_active,
    )


def make_administrator(
    kind: type[Administrator] = PlatformAdministrator,
    *,
    administrator_id: str = ADMIN_ID,
    email: str = "root@cropco.co",
    is_active: bool = True,
    role: AdministratorRole = AdministratorRole.ADMIN,
) -> Administrator:
    return kind(
        id=administrator_id,
        email=email,
        first_name="Root",
        last_name="Admin",
        is_active=is_active,
        role=role,
    )


class FakeUserRepository:
    """Users and grants of one tenant database."""

    def __init__(self) -> None:
        self.users: dict[str, tuple[TenantUser, str]] = {}
        self.grants: dict[str, tuple[PermissionModule, ...]] = {}
        self.permission_loads = 0

    def add(
        self,
        user: TenantUser,
        modules: tuple[PermissionModule, ...] = (CROPS,),
        password_hash: str = PASSWORD_HASH,
    ) -> None:
        self.users[user.id] = (user, password_hash)
        self.grants[user.id] = modules

    async def get_by_id(self, user_id: str) -> TenantUser | None:
        found = self.users.get(user_id)
        return found[0] if found else None

    async def get_by_email(self, email: str):
        for user, password_hash in self.users.values():
            if user.email == email:
                return user, password_hash
        return None

    async def list_permission_modules(self, user_id: str):
        self.permission_loads += 1
        return self.grants.get(user_id, ())


class FakeAdministratorRepository:
    def __init__(self, administrators: list[Administrator] | None = None) -> None:
        self.administrators = {a.id: a for a in administrators or []}

    async def get_by_id(self, administrator_id: str):
        return self.administrators.get(administrator_id)

    async def get_by_email(self, email: str):
        for administrator in self.administrators.values():
            if administrator.email == email:
                return administrator, PASSWORD_HASH
        return None


def user_repository_opener(repositories: dict[object, FakeUserRepository]):
    """Open the repository of whichever tenant engine is handed in."""

    @asynccontextmanager
    async def open_repository(engine):
        yield repositories[engine]

    return open_repository


def administrator_repository_opener(repository: FakeAdministratorRepository):
    @asynccontextmanager
    async def open_repository():
        yield repository

    return open_repository
