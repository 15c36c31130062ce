from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from saas_platform.core.errors import BusinessRuleError, ConflictError, NotFoundError
from saas_platform.db.base import RecordStatus
from saas_platform.db.models.tenant import Tenant
from saas_platform.schemas.tenant import TenantCreate, TenantUpdate, subscription_window_problem
from .base import BaseService

logger = logging.getLogger(__name__)


class TenantService(BaseService):
    """Tenant administration: lookup, paging, creation, partial update and deactivation."""

    async def get(self, tenant_id: UUID) -> Tenant:
        tenant = await self.uow.tenants.get_by_id(tenant_id)
        if tenant is None:
            raise NotFoundError(f"Tenant with ID {tenant_id} not found")
        return tenant

    async def get_by_code(self, tenant_code: str) -> Tenant:
        tenant = await self.uow.tenants.get_by_code(tenant_code)
        if tenant is None:
            raise NotFoundError(f"Tenant with code {tenant_code} not found")
        return tenant

    async def list_active(self) -> List[Tenant]:
        return await self.uow.tenants.get_active()

    async def search(self, term: str) -> List[Tenant]:
        return await self.uow.tenants.search(term)

    async def list_paged(
        self,
        *,
        search_term: Optional[str] = None,
        status: Optional[RecordStatus] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Tenant], int]:
        return await self.uow.tenants.get_paged(
            search_term=search_term, status=status, page_number=page_number, page_size=page_size
        )

    # PUBLIC_INTERFACE
    async def create(self, payload: TenantCreate) -> Tenant:
        """Create a tenant; the code must be unique across the system."""
        if not await self.uow.tenants.is_code_unique(payload.tenant_code):
            raise ConflictError(f"Tenant code {payload.tenant_code} already exists")
        tenant = Tenant(**payload.model_dump(), is_active=True)
        self._stamp_created(tenant)
        await self.uow.tenants.add(tenant)
        await self.uow.save_changes()
        logger.info("Created tenant %s (%s)", tenant.id, tenant.tenant_code)
        return tenant

    # PUBLIC_INTERFACE
    async def update(self, tenant_id: UUID, payload: TenantUpdate) -> Tenant:
        """Apply only the fields present in the payload."""
        tenant = await self.get(tenant_id)
        changes = payload.changes()
        problem = subscription_window_problem(
            changes.get("subscription_start_date", tenant.subscription_start_date),
            changes.get("subscription_end_date", tenant.subscription_end_date),
        )
        if problem:
            logger.info("Rejected update of tenant %s: %s", tenant.id, problem)
            raise BusinessRuleError(problem)
        self._apply_changes(tenant, changes)
        tenant = await self.uow.tenants.update(tenant)
        await self.uow.save_changes()
        logger.info("Updated tenant %s", tenant.id)
        return tenant

    # PUBLIC_INTERFACE
    async def deactivate(self, tenant_id: UUID) -> None:
        """Soft delete: the row stays, flagged inactive."""
        tenant = await self.get(tenant_id)
        self._apply_changes(tenant, {"is_active": False, "tenant_status": RecordStatus.INACTIVE})
        await self.uow.tenants.update(tenant)
        await self.uow.save_changes()
        logger.info("Deactivated tenant %s", tenant.id)
