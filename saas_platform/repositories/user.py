from __future__ import annotations

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select

from saas_platform.db.models.user import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for Users within a tenant."""

    model = User

    def _search_clause(self, term: str):
        return self.ilike_any(term, User.first_name, User.last_name, User.email, User.username)

    async def get_by_tenant_id(self, tenant_id: UUID) -> List[User]:
        stmt = select(User).where(User.tenant_id == tenant_id).order_by(User.created_date.desc())
        return await self.fetch_all(stmt)

    async def get_by_email(self, email: str, tenant_id: Optional[UUID] = None) -> List[User]:
        stmt = select(User).where(User.email == email)
        if tenant_id is not None:
            stmt = stmt.where(User.tenant_id == tenant_id)
        return await self.fetch_all(stmt)

    async def get_by_username(self, tenant_id: UUID, username: str) -> Optional[User]:
        stmt = select(User).where(User.tenant_id == tenant_id, User.username == username)
        return await self.scalar_one_or_none(stmt)

    async def get_active(self, tenant_id: UUID) -> List[User]:
        # Users carry no status column; the active flag alone decides.
        stmt = (
            select(User)
            .where(User.tenant_id == tenant_id, User.is_active.is_(True))
            .order_by(User.created_date.desc())
        )
        return await self.fetch_all(stmt)

    async def search(self, tenant_id: UUID, term: str) -> List[User]:
        stmt = (
            select(User)
            .where(User.tenant_id == tenant_id, self._search_clause(term))
            .order_by(User.created_date.desc())
        )
        return await self.fetch_all(stmt)

    async def get_paged(
        self,
        tenant_id: UUID,
        *,
        search_term: Optional[str] = None,
        is_active: Optional[bool] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[User], int]:
        stmt = select(User).where(User.tenant_id == tenant_id)
        if search_term and search_term.strip():
            stmt = stmt.where(self._search_clause(search_term.strip()))
        if is_active is not None:
            stmt = stmt.where(User.is_active.is_(is_active))
        return await self.paginate(stmt, page_number=page_number, page_size=page_size)

    async def is_username_unique(
        self, tenant_id: UUID, username: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        criteria = [User.tenant_id == tenant_id, User.username == username]
        if exclude_id is not None:
            criteria.append(User.id != exclude_id)
        return not await self.exists_where(*criteria)

    async def is_email_unique(
        self, tenant_id: UUID, email: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        criteria = [User.tenant_id == tenant_id, User.email == email]
        if exclude_id is not None:
            criteria.append(User.id != exclude_id)
        return not await self.exists_where(*criteria)
