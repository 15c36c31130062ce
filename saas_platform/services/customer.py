from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from saas_platform.core.errors import BusinessRuleError, ConflictError, NotFoundError
from saas_platform.db.base import RecordStatus
from saas_platform.db.models.customer import Customer
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.customer import CustomerCreate, CustomerUpdate, customer_name_problem
from .base import BaseService

logger = logging.getLogger(__name__)


class CustomerService(BaseService):
    """
    Customer management within one tenant.

    A customer belonging to another tenant is reported as not found, exactly
    like a missing one.
    """

    def __init__(self, uow: UnitOfWork, tenant_id: UUID, actor_id: Optional[UUID] = None) -> None:
        super().__init__(uow, actor_id)
        self.tenant_id = tenant_id

    async def get(self, customer_id: UUID) -> Customer:
        customer = await self.uow.customers.get_by_id(customer_id)
        if customer is None or customer.tenant_id != self.tenant_id:
            raise NotFoundError(f"Customer with ID {customer_id} not found")
        return customer

    async def get_by_code(self, customer_code: str) -> Customer:
        customer = await self.uow.customers.get_by_code(self.tenant_id, customer_code)
        if customer is None:
            raise NotFoundError(f"Customer with code {customer_code} not found")
        return customer

    async def list_active(self) -> List[Customer]:
        return await self.uow.customers.get_active(self.tenant_id)

    async def search(self, term: str) -> List[Customer]:
        return await self.uow.customers.search(self.tenant_id, term)

    async def list_paged(
        self,
        *,
        search_term: Optional[str] = None,
        status: Optional[RecordStatus] = None,
        segment: Optional[str] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Customer], int]:
        return await self.uow.customers.get_paged(
            self.tenant_id,
            search_term=search_term,
            status=status,
            segment=segment,
            page_number=page_number,
            page_size=page_size,
        )

    # PUBLIC_INTERFACE
    async def create(self, payload: CustomerCreate) -> Customer:
        """Create a customer; the code must be unique within the tenant."""
        if await self.uow.tenants.get_by_id(self.tenant_id) is None:
            raise NotFoundError(f"Tenant with ID {self.tenant_id} not found")
        if not await self.uow.customers.is_code_unique(self.tenant_id, payload.customer_code):
            raise ConflictError(f"Customer code {payload.customer_code} already exists")
        customer = Customer(**payload.model_dump(), tenant_id=self.tenant_id, is_active=True)
        self._stamp_created(customer)
        await self.uow.customers.add(customer)
        await self.uow.save_changes()
        logger.info("Created customer %s (%s)", customer.id, customer.customer_code)
        return customer

    # PUBLIC_INTERFACE
    async def update(self, customer_id: UUID, payload: CustomerUpdate) -> Customer:
        """Apply only the fields present in the payload."""
        customer = await self.get(customer_id)
        changes = payload.changes()
        problem = customer_name_problem(
            customer.customer_type,
            changes.get("first_name", customer.first_name),
            changes.get("last_name", customer.last_name),
            changes.get("company_name", customer.company_name),
        )
        if problem:
            logger.info("Rejected update of customer %s: %s", customer.id, problem)
            raise BusinessRuleError(problem)
        self._apply_changes(customer, changes)
        customer = await self.uow.customers.update(customer)
        await self.uow.save_changes()
        logger.info("Updated customer %s", customer.id)
        return customer

    # PUBLIC_INTERFACE
    async def deactivate(self, customer_id: UUID) -> None:
        """Soft delete: the row stays, flagged inactive."""
        customer = await self.get(customer_id)
        self._apply_changes(customer, {"is_active": False, "customer_status": RecordStatus.INACTIVE})
        await self.uow.customers.update(customer)
        await self.uow.save_changes()
        logger.info("Deactivated customer %s", customer.id)
