from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from saas_platform.core.deps import (
    PageParams,
    Principal,
    get_page_params,
    get_tenant_id,
    get_tenant_principal,
    get_unit_of_work,
)
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.common import ApiResponse, MessageResponse, PagedResponse
from saas_platform.schemas.user_role import UserRoleCreate, UserRoleRead
from saas_platform.services.user_role import UserRoleService

router = APIRouter(prefix="/user-roles", tags=["User Roles"])


def _service(
    tenant_id: UUID = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    principal: Principal = Depends(get_tenant_principal),
) -> UserRoleService:
    return UserRoleService(uow, tenant_id, actor_id=principal.user_id)


# PUBLIC_INTERFACE
@router.get(
    "/user/{user_id}",
    response_model=PagedResponse[UserRoleRead],
    summary="List a user's roles",
)
async def list_user_roles(
    user_id: UUID,
    page: PageParams = Depends(get_page_params),
    service: UserRoleService = Depends(_service),
) -> PagedResponse[UserRoleRead]:
    items, total = await service.list_for_user(user_id, page_number=page.page_number, page_size=page.page_size)
    return PagedResponse[UserRoleRead].build(
        [UserRoleRead.model_validate(a) for a in items],
        page_number=page.page_number,
        page_size=page.page_size,
        total_records=total,
    )


# PUBLIC_INTERFACE
@router.get("/{assignment_id}", response_model=ApiResponse[UserRoleRead], summary="Get role assignment")
async def get_user_role(
    assignment_id: UUID, service: UserRoleService = Depends(_service)
) -> ApiResponse[UserRoleRead]:
    assignment = await service.get(assignment_id)
    return ApiResponse[UserRoleRead].ok(UserRoleRead.model_validate(assignment))


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[UserRoleRead],
    status_code=status.HTTP_201_CREATED,
    summary="Assign role",
    description="Assign a role to a user of the current tenant. Each (user, role) pair may exist once.",
)
async def assign_user_role(
    payload: UserRoleCreate, service: UserRoleService = Depends(_service)
) -> ApiResponse[UserRoleRead]:
    assignment = await service.assign(payload)
    return ApiResponse[UserRoleRead].ok(UserRoleRead.model_validate(assignment), message="Role assigned successfully")


# PUBLIC_INTERFACE
@router.delete("/{assignment_id}", response_model=MessageResponse, summary="Remove role assignment")
async def delete_user_role(assignment_id: UUID, service: UserRoleService = Depends(_service)) -> MessageResponse:
    await service.remove(assignment_id)
    return MessageResponse(message="Role removed successfully")
