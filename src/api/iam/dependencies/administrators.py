"""Request-scoped administrator management service."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.administrator_service import AdministratorService
from iam.domain.principals import PlatformAdministrator
from iam.infrastructure.administrator_repository import AdministratorRepository
from infrastructure.database.dependencies import get_platform_session


def get_administrator_service(
    session: Annotated[AsyncSession, Depends(get_platform_session)],
) -> AdministratorService[PlatformAdministrator]:
    """Get the service managing platform administrator accounts."""
    return AdministratorService(
        repository=AdministratorRepository.platform(session),
        session=session,
        principal=PlatformAdministrator,
    )
