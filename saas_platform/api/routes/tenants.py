from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from saas_platform.core.deps import PageParams, Principal, get_current_principal, get_page_params, get_unit_of_work
from saas_platform.db.base import RecordStatus
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.common import ApiResponse, MessageResponse, PagedResponse
from saas_platform.schemas.tenant import TenantCreate, TenantRead, TenantUpdate
from saas_platform.services.tenant import TenantService

router = APIRouter(prefix="/tenants", tags=["Tenants"])


def _service(
    uow: UnitOfWork = Depends(get_unit_of_work),
    principal: Principal = Depends(get_current_principal),
) -> TenantService:
    return TenantService(uow, actor_id=principal.user_id)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=PagedResponse[TenantRead],
    summary="List tenants",
    description="Paged tenant list, newest first, with optional search term and status filter.",
)
async def list_tenants(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    tenant_status: Optional[RecordStatus] = Query(None, alias="status"),
    page: PageParams = Depends(get_page_params),
    service: TenantService = Depends(_service),
) -> PagedResponse[TenantRead]:
    items, total = await service.list_paged(
        search_term=search_term,
        status=tenant_status,
        page_number=page.page_number,
        page_size=page.page_size,
    )
    return PagedResponse[TenantRead].build(
        [TenantRead.model_validate(t) for t in items],
        page_number=page.page_number,
        page_size=page.page_size,
        total_records=total,
    )


# PUBLIC_INTERFACE
@router.get(
    "/active",
    response_model=ApiResponse[List[TenantRead]],
    summary="List active tenants",
)
async def list_active_tenants(service: TenantService = Depends(_service)) -> ApiResponse[List[TenantRead]]:
    items = await service.list_active()
    return ApiResponse[List[TenantRead]].ok([TenantRead.model_validate(t) for t in items])


# PUBLIC_INTERFACE
@router.get(
    "/search",
    response_model=ApiResponse[List[TenantRead]],
    summary="Search tenants",
    description="Case-insensitive match on name, contact email or code.",
)
async def search_tenants(
    search_term: str = Query(..., min_length=1, alias="searchTerm"),
    service: TenantService = Depends(_service),
) -> ApiResponse[List[TenantRead]]:
    items = await service.search(search_term)
    return ApiResponse[List[TenantRead]].ok([TenantRead.model_validate(t) for t in items])


# PUBLIC_INTERFACE
@router.get("/by-code/{tenant_code}", response_model=ApiResponse[TenantRead], summary="Get tenant by code")
async def get_tenant_by_code(tenant_code: str, service: TenantService = Depends(_service)) -> ApiResponse[TenantRead]:
    tenant = await service.get_by_code(tenant_code)
    return ApiResponse[TenantRead].ok(TenantRead.model_validate(tenant))


# PUBLIC_INTERFACE
@router.get("/{tenant_id}", response_model=ApiResponse[TenantRead], summary="Get tenant")
async def get_tenant(tenant_id: UUID, service: TenantService = Depends(_service)) -> ApiResponse[TenantRead]:
    tenant = await service.get(tenant_id)
    return ApiResponse[TenantRead].ok(TenantRead.model_validate(tenant))


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[TenantRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create tenant",
    description="Create a tenant. The tenant code must be unique across the system.",
)
async def create_tenant(payload: TenantCreate, service: TenantService = Depends(_service)) -> ApiResponse[TenantRead]:
    tenant = await service.create(payload)
    return ApiResponse[TenantRead].ok(TenantRead.model_validate(tenant), message="Tenant created successfully")


# PUBLIC_INTERFACE
@router.api_route(
    "/{tenant_id}",
    methods=["PATCH", "PUT"],
    response_model=ApiResponse[TenantRead],
    summary="Update tenant",
    description="Partial update: omitted fields are unchanged, explicit nulls clear nullable fields.",
)
async def update_tenant(
    tenant_id: UUID, payload: TenantUpdate, service: TenantService = Depends(_service)
) -> ApiResponse[TenantRead]:
    tenant = await service.update(tenant_id, payload)
    return ApiResponse[TenantRead].ok(TenantRead.model_validate(tenant), message="Tenant updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{tenant_id}",
    response_model=MessageResponse,
    summary="Deactivate tenant",
    description="Soft delete: the tenant is flagged inactive and kept for history.",
)
async def delete_tenant(tenant_id: UUID, service: TenantService = Depends(_service)) -> MessageResponse:
    await service.deactivate(tenant_id)
    return MessageResponse(message="Tenant deactivated successfully")
