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
from saas_platform.db.base import RecordStatus
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.common import ApiResponse, MessageResponse, PagedResponse
from saas_platform.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from saas_platform.services.customer import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


def _service(
    tenant_id: UUID = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    principal: Principal = Depends(get_tenant_principal),
) -> CustomerService:
    return CustomerService(uow, tenant_id, actor_id=principal.user_id)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=PagedResponse[CustomerRead],
    summary="List customers",
    description="Paged customers of the current tenant, newest first; search, status and segment filters combine with AND.",
)
async def list_customers(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    customer_status: Optional[RecordStatus] = Query(None, alias="status"),
    segment: Optional[str] = Query(None),
    page: PageParams = Depends(get_page_params),
    service: CustomerService = Depends(_service),
) -> PagedResponse[CustomerRead]:
    items, total = await service.list_paged(
        search_term=search_term,
        status=customer_status,
        segment=segment,
        page_number=page.page_number,
        page_size=page.page_size,
    )
    return PagedResponse[CustomerRead].build(
        [CustomerRead.model_validate(c) for c in items],
        page_number=page.page_number,
        page_size=page.page_size,
        total_records=total,
    )


# PUBLIC_INTERFACE
@router.get("/active", response_model=ApiResponse[List[CustomerRead]], summary="List active customers")
async def list_active_customers(service: CustomerService = Depends(_service)) -> ApiResponse[List[CustomerRead]]:
    items = await service.list_active()
    return ApiResponse[List[CustomerRead]].ok([CustomerRead.model_validate(c) for c in items])


# PUBLIC_INTERFACE
@router.get(
    "/search",
    response_model=ApiResponse[List[CustomerRead]],
    summary="Search customers",
    description="Case-insensitive match on names, company name, email or code.",
)
async def search_customers(
    search_term: str = Query(..., min_length=1, alias="searchTerm"),
    service: CustomerService = Depends(_service),
) -> ApiResponse[List[CustomerRead]]:
    items = await service.search(search_term)
    return ApiResponse[List[CustomerRead]].ok([CustomerRead.model_validate(c) for c in items])


# PUBLIC_INTERFACE
@router.get("/by-code/{customer_code}", response_model=ApiResponse[CustomerRead], summary="Get customer by code")
async def get_customer_by_code(
    customer_code: str, service: CustomerService = Depends(_service)
) -> ApiResponse[CustomerRead]:
    customer = await service.get_by_code(customer_code)
    return ApiResponse[CustomerRead].ok(CustomerRead.model_validate(customer))


# PUBLIC_INTERFACE
@router.get("/{customer_id}", response_model=ApiResponse[CustomerRead], summary="Get customer")
async def get_customer(customer_id: UUID, service: CustomerService = Depends(_service)) -> ApiResponse[CustomerRead]:
    customer = await service.get(customer_id)
    return ApiResponse[CustomerRead].ok(CustomerRead.model_validate(customer))


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[CustomerRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create customer",
    description="Create a customer for the current tenant. The code must be unique within the tenant.",
)
async def create_customer(
    payload: CustomerCreate, service: CustomerService = Depends(_service)
) -> ApiResponse[CustomerRead]:
    customer = await service.create(payload)
    return ApiResponse[CustomerRead].ok(CustomerRead.model_validate(customer), message="Customer created successfully")


# PUBLIC_INTERFACE
@router.api_route(
    "/{customer_id}",
    methods=["PATCH", "PUT"],
    response_model=ApiResponse[CustomerRead],
    summary="Update customer",
    description="Partial update: omitted fields are unchanged, explicit nulls clear nullable fields.",
)
async def update_customer(
    customer_id: UUID, payload: CustomerUpdate, service: CustomerService = Depends(_service)
) -> ApiResponse[CustomerRead]:
    customer = await service.update(customer_id, payload)
    return ApiResponse[CustomerRead].ok(CustomerRead.model_validate(customer), message="Customer updated successfully")


# PUBLIC_INTERFACE
@router.delete("/{customer_id}", response_model=MessageResponse, summary="Deactivate customer")
async def delete_customer(customer_id: UUID, service: CustomerService = Depends(_service)) -> MessageResponse:
    await service.deactivate(customer_id)
    return MessageResponse(message="Customer deactivated successfully")
