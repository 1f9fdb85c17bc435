"""PostgreSQL implementation of ITenantUserRepository.

A repository instance is bound to one session on one tenant's engine, so
every query it runs can only see that tenant's users.
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.permissions import ModuleAction, PermissionModule
from iam.domain.principals import TenantUser
from iam.infrastructure.models import (
    ModuleActionModel,
    ModuleModel,
    UserActionModel,
    UserModel,
)
from iam.infrastructure.observability import (
    DefaultPrincipalRepositoryProbe,
    PrincipalRepositoryProbe,
)
from iam.ports.repositories import ITenantUserRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


_KIND = "tenant_user"


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


def group_permission_rows(
    rows: Iterable[tuple[str, str, str | None, str | None]],
) -> tuple[PermissionModule, ...]:
    """Group (module, action, path_endpoint, description) rows by module.

    Modules keep the order of their first row.
    """
    grouped: dict[str, list[ModuleAction]] = {}
    for module_name, action_name, path_endpoint, description in rows:
        grouped.setdefault(module_name, []).append(
            ModuleAction(
                name=action_name,
                path_endpoint=path_endpoint or "",
                description=description or "",
            )
        )
    return tuple(
        PermissionModule(name=name, actions=tuple(actions))
        for name, actions in grouped.items()
    )


class TenantUserRepository(ITenantUserRepository):
    """Reads users and their grants from one tenant database."""

    def __init__(
        self,
        session: AsyncSession,
        probe: PrincipalRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a session on a tenant engine.

        Args:
            session: AsyncSession bound to the tenant's engine
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultPrincipalRepositoryProbe()

    async def get_by_id(self, user_id: str) -> TenantUser | None:
        if not _is_uuid(user_id):
            self._probe.principal_not_found(_KIND, user_id)
            return None
        model = await self._get_model(UserModel.id == user_id)
        if model is None:
            self._probe.principal_not_found(_KIND, user_id)
            return None
        self._probe.principal_retrieved(_KIND, model.id)
        return self._to_domain(model)

    async def get_by_email(self, email: str) -> tuple[TenantUser, str] | None:
        model = await self._get_model(UserModel.email == email.strip().lower())
        if model is None:
            self._probe.principal_not_found(_KIND, email)
            return None
        self._probe.principal_retrieved(_KIND, model.id)
        return self._to_domain(model), model.password

    async def list_permission_modules(
        self, user_id: str
    ) -> tuple[PermissionModule, ...]:
        """Load the current grants of a user, grouped by module.

        Always queried; grants are never cached between calls.
        """
        stmt = (
            select(
                ModuleModel.name,
                ModuleActionModel.name,
                ModuleActionModel.path_endpoint,
                ModuleActionModel.description,
            )
            .join(ModuleActionModel, ModuleActionModel.module_id == ModuleModel.id)
            .join(UserActionModel, UserActionModel.action_id == ModuleActionModel.id)
            .where(UserActionModel.user_id == user_id)
            .order_by(ModuleModel.name, ModuleActionModel.name)
        )
        result = await self._session.execute(stmt)
        modules = group_permission_rows(result.tuples().all())
        self._probe.permissions_loaded(
            user_id=user_id,
            modules=len(modules),
            actions=sum(len(module.actions) for module in modules),
        )
        return modules

    async def _get_model(self, criterion) -> UserModel | None:
        stmt = select(UserModel).where(criterion, UserModel.deleted_at.is_(None))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: UserModel) -> TenantUser:
        return TenantUser(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            is_active=model.is_active,
        )


def tenant_user_repository_opener():
    """Build the factory resolvers use to read users of one tenant.

    The session is bound to the engine handed in, which is always the
    connection resolved for the request's tenant.
    """

    @asynccontextmanager
    async def open_repository(
        engine: AsyncEngine,
    ) -> AsyncIterator[TenantUserRepository]:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield TenantUserRepository(session)

    return open_repository
