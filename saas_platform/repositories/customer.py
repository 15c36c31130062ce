from __future__ import annotations

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select

from saas_platform.db.base import RecordStatus
from saas_platform.db.models.customer import Customer
from .base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Repository for Customers. Every query is scoped to one tenant."""

    model = Customer

    def _search_clause(self, term: str):
        return self.ilike_any(
            term,
            Customer.first_name,
            Customer.last_name,
            Customer.company_name,
            Customer.email,
            Customer.customer_code,
        )

    async def get_by_code(self, tenant_id: UUID, customer_code: str) -> Optional[Customer]:
        stmt = select(Customer).where(
            Customer.tenant_id == tenant_id, Customer.customer_code == customer_code
        )
        return await self.scalar_one_or_none(stmt)

    async def get_by_tenant_id(self, tenant_id: UUID) -> List[Customer]:
        stmt = select(Customer).where(Customer.tenant_id == tenant_id).order_by(Customer.created_date.desc())
        return await self.fetch_all(stmt)

    async def get_by_email(self, email: str) -> List[Customer]:
        stmt = select(Customer).where(Customer.email == email)
        return await self.fetch_all(stmt)

    async def get_active(self, tenant_id: UUID) -> List[Customer]:
        stmt = (
            select(Customer)
            .where(
                Customer.tenant_id == tenant_id,
                Customer.is_active.is_(True),
                Customer.customer_status == RecordStatus.ACTIVE,
            )
            .order_by(Customer.created_date.desc())
        )
        return await self.fetch_all(stmt)

    async def search(self, tenant_id: UUID, term: str) -> List[Customer]:
        stmt = (
            select(Customer)
            .where(Customer.tenant_id == tenant_id, self._search_clause(term))
            .order_by(Customer.created_date.desc())
        )
        return await self.fetch_all(stmt)

    async def get_paged(
        self,
        tenant_id: UUID,
        *,
        search_term: Optional[str] = None,
        status: Optional[RecordStatus] = None,
        segment: Optional[str] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Customer], int]:
        stmt = select(Customer).where(Customer.tenant_id == tenant_id)
        if search_term and search_term.strip():
            stmt = stmt.where(self._search_clause(search_term.strip()))
        if status:
            stmt = stmt.where(Customer.customer_status == status)
        if segment and segment.strip():
            stmt = stmt.where(Customer.customer_segment == segment.strip())
        return await self.paginate(stmt, page_number=page_number, page_size=page_size)

    async def is_code_unique(
        self, tenant_id: UUID, customer_code: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        """True when no other customer of the tenant uses the code."""
        criteria = [Customer.tenant_id == tenant_id, Customer.customer_code == customer_code]
        if exclude_id is not None:
            criteria.append(Customer.id != exclude_id)
        return not await self.exists_where(*criteria)
