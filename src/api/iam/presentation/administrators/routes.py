"""HTTP routes for platform administrator accounts.

Every route requires a platform administrator. Accounts with the admin
role can only change their own password.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from iam.application.administrator_service import AdministratorService
from iam.dependencies.administrators import get_administrator_service
from iam.dependencies.principal import require_administrator
from iam.presentation.administrators.models import (
    AdministratorListResponse,
    AdministratorResponse,
    ChangePasswordRequest,
    CreateAdministratorRequest,
    PasswordResetResponse,
    UpdateAdministratorRequest,
)
from shared_kernel.middleware import RequestContext

router = APIRouter(
    prefix="/administrators",
    tags=["administrators"],
)

AdministratorContext = Annotated[RequestContext, Depends(require_administrator())]
Service = Annotated[AdministratorService, Depends(get_administrator_service)]


@router.post("/create/one", status_code=status.HTTP_201_CREATED)
async def create_administrator(
    request: CreateAdministratorRequest,
    _: AdministratorContext,
    service: Service,
) -> AdministratorResponse:
    """Create an administrator account.

    Raises:
        DuplicateAdministratorError: 409 if the email is taken
    """
    administrator = await service.create_administrator(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
        role=request.role,
        cell_phone_number=request.cell_phone_number,
    )
    return AdministratorResponse.from_domain(administrator)


@router.get("/all")
async def list_administrators(
    _: AdministratorContext,
    service: Service,
    query: Annotated[str | None, Query(max_length=100)] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> AdministratorListResponse:
    administrators, total = await service.list_administrators(
        query=query, limit=limit, offset=offset
    )
    return AdministratorListResponse.from_page(
        administrators, total, limit=limit, offset=offset
    )


@router.get("/one/{administrator_id}")
async def get_administrator(
    administrator_id: str,
    _: AdministratorContext,
    service: Service,
) -> AdministratorResponse:
    administrator = await service.get_administrator(administrator_id)
    return AdministratorResponse.from_domain(administrator)


@router.patch("/update/one/{administrator_id}")
async def update_administrator(
    administrator_id: str,
    request: UpdateAdministratorRequest,
    _: AdministratorContext,
    service: Service,
) -> AdministratorResponse:
    """Change account attributes; admin-role accounts are refused with 400."""
    administrator = await service.update_administrator(
        administrator_id,
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        cell_phone_number=request.cell_phone_number,
        role=request.role,
    )
    return AdministratorResponse.from_domain(administrator)


@router.delete(
    "/remove/one/{administrator_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_administrator(
    administrator_id: str,
    _: AdministratorContext,
    service: Service,
) -> None:
    await service.remove_administrator(administrator_id)


@router.put("/toggle-status/one/{administrator_id}")
async def toggle_administrator_status(
    administrator_id: str,
    _: AdministratorContext,
    service: Service,
) -> AdministratorResponse:
    administrator = await service.toggle_status(administrator_id)
    return AdministratorResponse.from_domain(administrator)


@router.put("/reset-password/one/{administrator_id}")
async def reset_administrator_password(
    administrator_id: str,
    _: AdministratorContext,
    service: Service,
) -> PasswordResetResponse:
    """Replace the password with a generated one, returned in this response only."""
    reset = await service.reset_password(administrator_id)
    return PasswordResetResponse.from_reset(reset)


@router.put("/change-password/one", status_code=status.HTTP_204_NO_CONTENT)
async def change_own_password(
    request: ChangePasswordRequest,
    context: AdministratorContext,
    service: Service,
) -> None:
    """Change the caller's own password.

    Raises:
        IncorrectPasswordError: 400 if the old password does not match
    """
    assert context.principal is not None
    await service.change_password(
        context.principal.id,
        old_password=request.old_password,
        new_password=request.new_password,
    )
