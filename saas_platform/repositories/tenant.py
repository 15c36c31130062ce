from __future__ import annotations

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select

from saas_platform.db.base import RecordStatus
from saas_platform.db.models.tenant import Tenant
from .base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """
    Repository for Tenants.

    Tenants are the root of the hierarchy, so nothing here is tenant-scoped and
    tenant codes are unique across the whole system.
    """

    model = Tenant

    def _search_clause(self, term: str):
        return self.ilike_any(term, Tenant.tenant_name, Tenant.contact_email, Tenant.tenant_code)

    async def get_by_code(self, tenant_code: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.tenant_code == tenant_code)
        return await self.scalar_one_or_none(stmt)

    async def get_by_contact_email(self, contact_email: str) -> List[Tenant]:
        stmt = select(Tenant).where(Tenant.contact_email == contact_email)
        return await self.fetch_all(stmt)

    async def get_active(self) -> List[Tenant]:
        stmt = (
            select(Tenant)
            .where(Tenant.is_active.is_(True), Tenant.tenant_status == RecordStatus.ACTIVE)
            .order_by(Tenant.created_date.desc())
        )
        return await self.fetch_all(stmt)

    async def search(self, term: str) -> List[Tenant]:
        stmt = select(Tenant).where(self._search_clause(term)).order_by(Tenant.created_date.desc())
        return await self.fetch_all(stmt)

    async def get_paged(
        self,
        *,
        search_term: Optional[str] = None,
        status: Optional[RecordStatus] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Tenant], int]:
        stmt = select(Tenant)
        if search_term and search_term.strip():
            stmt = stmt.where(self._search_clause(search_term.strip()))
        if status:
            stmt = stmt.where(Tenant.tenant_status == status)
        return await self.paginate(stmt, page_number=page_number, page_size=page_size)

    async def is_code_unique(self, tenant_code: str, exclude_id: Optional[UUID] = None) -> bool:
        """True when no other tenant uses the code."""
        criteria = [Tenant.tenant_code == tenant_code]
        if exclude_id is not None:
            criteria.append(Tenant.id != exclude_id)
        return not await self.exists_where(*criteria)
