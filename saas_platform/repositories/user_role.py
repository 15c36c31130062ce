from __future__ import annotations

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select

from saas_platform.db.models.user import UserRole
from .base import BaseRepository


class UserRoleRepository(BaseRepository[UserRole]):
    """Repository for user-role assignments (append/remove only)."""

    model = UserRole

    async def get_by_user_id(self, user_id: UUID) -> List[UserRole]:
        stmt = select(UserRole).where(UserRole.user_id == user_id).order_by(UserRole.created_date.desc())
        return await self.fetch_all(stmt)

    async def get_assignment(self, user_id: UUID, role_id: UUID) -> Optional[UserRole]:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        return await self.scalar_one_or_none(stmt)

    async def get_paged(
        self, user_id: UUID, *, page_number: int = 1, page_size: int = 10
    ) -> Tuple[List[UserRole], int]:
        stmt = select(UserRole).where(UserRole.user_id == user_id)
        return await self.paginate(stmt, page_number=page_number, page_size=page_size)

    async def is_assignment_unique(self, user_id: UUID, role_id: UUID) -> bool:
        return not await self.exists_where(UserRole.user_id == user_id, UserRole.role_id == role_id)

    async def remove(self, entity: UserRole) -> None:
        """Stage the assignment for deletion on the next flush."""
        await self.session.delete(entity)
