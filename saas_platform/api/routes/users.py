from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from saas_platform.core.deps import (
    PageParams,
    Principal,
    get_page_params,
    get_tenant_id,
    get_tenant_principal,
    get_unit_of_work,
)
from saas_platform.db.models.user import User
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.common import ApiResponse, MessageResponse, PagedResponse
from saas_platform.schemas.user import UserCreate, UserRead, UserUpdate
from saas_platform.services.user import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def _service(
    tenant_id: UUID = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    principal: Principal = Depends(get_tenant_principal),
) -> UserService:
    return UserService(uow, tenant_id, actor_id=principal.user_id)


async def _user_to_read(service: UserService, user: User) -> UserRead:
    read = UserRead.model_validate(user)
    read.role_ids = await service.role_ids(user.id)
    return read


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=PagedResponse[UserRead],
    summary="List users",
    description="Paged users of the current tenant, newest first.",
)
async def list_users(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    page: PageParams = Depends(get_page_params),
    service: UserService = Depends(_service),
) -> PagedResponse[UserRead]:
    items, total = await service.list_paged(
        search_term=search_term,
        is_active=is_active,
        page_number=page.page_number,
        page_size=page.page_size,
    )
    return PagedResponse[UserRead].build(
        [await _user_to_read(service, u) for u in items],
        page_number=page.page_number,
        page_size=page.page_size,
        total_records=total,
    )


# PUBLIC_INTERFACE
@router.get("/active", response_model=ApiResponse[List[UserRead]], summary="List active users")
async def list_active_users(service: UserService = Depends(_service)) -> ApiResponse[List[UserRead]]:
    items = await service.list_active()
    return ApiResponse[List[UserRead]].ok([await _user_to_read(service, u) for u in items])


# PUBLIC_INTERFACE
@router.get(
    "/search",
    response_model=ApiResponse[List[UserRead]],
    summary="Search users",
    description="Case-insensitive match on first/last name, email or username.",
)
async def search_users(
    search_term: str = Query(..., min_length=1, alias="searchTerm"),
    service: UserService = Depends(_service),
) -> ApiResponse[List[UserRead]]:
    items = await service.search(search_term)
    return ApiResponse[List[UserRead]].ok([await _user_to_read(service, u) for u in items])


# PUBLIC_INTERFACE
@router.get("/{user_id}", response_model=ApiResponse[UserRead], summary="Get user")
async def get_user(user_id: UUID, service: UserService = Depends(_service)) -> ApiResponse[UserRead]:
    user = await service.get(user_id)
    return ApiResponse[UserRead].ok(await _user_to_read(service, user))


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description=(
        "Create a user for the current tenant. Optional roleIds are assigned in the "
        "same transaction; if any write fails nothing is stored."
    ),
)
async def create_user(payload: UserCreate, service: UserService = Depends(_service)) -> ApiResponse[UserRead]:
    user = await service.create(payload)
    return ApiResponse[UserRead].ok(await _user_to_read(service, user), message="User created successfully")


# PUBLIC_INTERFACE
@router.api_route(
    "/{user_id}",
    methods=["PATCH", "PUT"],
    response_model=ApiResponse[UserRead],
    summary="Update user",
    description="Partial update: omitted fields are unchanged, explicit nulls clear nullable fields.",
)
async def update_user(
    user_id: UUID, payload: UserUpdate, service: UserService = Depends(_service)
) -> ApiResponse[UserRead]:
    user = await service.update(user_id, payload)
    return ApiResponse[UserRead].ok(await _user_to_read(service, user), message="User updated successfully")


# PUBLIC_INTERFACE
@router.delete("/{user_id}", response_model=MessageResponse, summary="Deactivate user")
async def delete_user(user_id: UUID, service: UserService = Depends(_service)) -> MessageResponse:
    await service.deactivate(user_id)
    return MessageResponse(message="User deactivated successfully")
