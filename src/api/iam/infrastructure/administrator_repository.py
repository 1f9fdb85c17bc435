"""PostgreSQL implementation of IAdministratorManagementRepository.

One class serves both administrator tables; the model and the principal
type it builds are chosen at construction.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Generic, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from iam.domain.principals import (
    AdministratorRole,
    PlatformAdministrator,
    TenantAdministrator,
)
from iam.infrastructure.models import AdministratorModel, TenantAdministratorModel
from iam.infrastructure.observability import (
    DefaultPrincipalRepositoryProbe,
    PrincipalRepositoryProbe,
)
from iam.ports.exceptions import DuplicateAdministratorError

A = TypeVar("A", PlatformAdministrator, TenantAdministrator)
M = TypeVar("M", AdministratorModel, TenantAdministratorModel)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class AdministratorRepository(Generic[A, M]):
    """Administrator accounts in the platform database."""

    def __init__(
        self,
        session: AsyncSession,
        model: type[M],
        principal: type[A],
        probe: PrincipalRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._model = model
        self._principal = principal
        self._probe = probe or DefaultPrincipalRepositoryProbe()

    @classmethod
    def platform(
        cls, session: AsyncSession
    ) -> AdministratorRepository[PlatformAdministrator, AdministratorModel]:
        return cls(session, AdministratorModel, PlatformAdministrator)

    @classmethod
    def tenant_management(
        cls, session: AsyncSession
    ) -> AdministratorRepository[TenantAdministrator, TenantAdministratorModel]:
        return cls(session, TenantAdministratorModel, TenantAdministrator)

    @property
    def _kind(self) -> str:
        return self._model.__tablename__

    async def get_by_id(self, administrator_id: str) -> A | None:
        model = await self._get_model(self._model.id == administrator_id)
        if model is None:
            self._probe.principal_not_found(self._kind, administrator_id)
            return None
        self._probe.principal_retrieved(self._kind, model.id)
        return self._to_domain(model)

    async def get_by_email(self, email: str) -> tuple[A, str] | None:
        model = await self._get_model(self._model.email == email.strip().lower())
        if model is None:
            self._probe.principal_not_found(self._kind, email)
            return None
        self._probe.principal_retrieved(self._kind, model.id)
        return self._to_domain(model), model.password

    async def list_administrators(
        self, query: str | None, limit: int, offset: int
    ) -> tuple[list[A], int]:
        """Return one page of accounts ordered by name."""
        stmt = select(self._model).where(self._model.deleted_at.is_(None))
        if query:
            pattern = f"{_escape_like(query)}%"
            stmt = stmt.where(
                or_(
                    self._model.first_name.ilike(pattern, escape="\\"),
                    self._model.last_name.ilike(pattern, escape="\\"),
                    self._model.email.ilike(pattern, escape="\\"),
                )
            )

        total = await self._session.scalar(
            select(func.count()).select_from(stmt.subquery())
        )
        result = await self._session.execute(
            stmt.order_by(
                self._model.first_name, self._model.last_name, self._model.id
            )
            .limit(limit)
            .offset(offset)
        )
        administrators = [self._to_domain(model) for model in result.scalars().all()]
        return administrators, int(total or 0)

    async def get_password_hash(self, administrator_id: str) -> str | None:
        model = await self._get_model(self._model.id == administrator_id)
        return model.password if model is not None else None

    async def save(self, administrator: A, password_hash: str | None = None) -> None:
        """Insert or update an account.

        Raises:
            DuplicateAdministratorError: If the email is already taken
            ValueError: If a new account comes without a password hash
        """
        model = await self._get_model(self._model.id == administrator.id)
        if model is None:
            if password_hash is None:
                raise ValueError("A new administrator requires a password hash")
            model = self._model(id=administrator.id)
            self._session.add(model)

        model.first_name = administrator.first_name
        model.last_name = administrator.last_name
        model.email = administrator.email
        model.cell_phone_number = administrator.cell_phone_number
        model.role = administrator.role
        model.is_active = administrator.is_active
        if password_hash is not None:
            model.password = password_hash

        try:
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateAdministratorError(
                f"Email '{administrator.email}' is already taken"
            ) from e

    async def set_password(self, administrator_id: str, password_hash: str) -> None:
        model = await self._get_model(self._model.id == administrator_id)
        if model is None:
            return
        model.password = password_hash
        await self._session.flush()

    async def soft_delete(self, administrator_id: str) -> None:
        model = await self._get_model(self._model.id == administrator_id)
        if model is None:
            return
        model.mark_deleted()
        await self._session.flush()

    async def _get_model(self, criterion) -> M | None:
        stmt = select(self._model).where(criterion, self._model.deleted_at.is_(None))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_domain(self, model: M) -> A:
        return self._principal(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            is_active=model.is_active,
            role=AdministratorRole(model.role),
            cell_phone_number=model.cell_phone_number,
        )


def administrator_repository_opener(
    get_sessionmaker: Callable[[], async_sessionmaker[AsyncSession]],
    build: Callable[[AsyncSession], AdministratorRepository],
):
    """Build a factory yielding a repository on a short-lived platform session.

    Args:
        get_sessionmaker: Returns the platform session factory.
        build: `AdministratorRepository.platform` or `.tenant_management`.
    """

    @asynccontextmanager
    async def open_repository() -> AsyncIterator[AdministratorRepository]:
        async with get_sessionmaker()() as session:
            yield build(session)

    return open_repository
