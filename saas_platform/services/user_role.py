from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from saas_platform.core.errors import ConflictError, NotFoundError
from saas_platform.db.models.user import UserRole
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.user_role import UserRoleCreate
from .base import BaseService

logger = logging.getLogger(__name__)


class UserRoleService(BaseService):
    """Role assignments for users of one tenant."""

    def __init__(self, uow: UnitOfWork, tenant_id: UUID, actor_id: Optional[UUID] = None) -> None:
        super().__init__(uow, actor_id)
        self.tenant_id = tenant_id

    async def _ensure_user(self, user_id: UUID) -> None:
        user = await self.uow.users.get_by_id(user_id)
        if user is None or user.tenant_id != self.tenant_id:
            raise NotFoundError(f"User with ID {user_id} not found")

    async def get(self, assignment_id: UUID) -> UserRole:
        assignment = await self.uow.user_roles.get_by_id(assignment_id)
        if assignment is None:
            raise NotFoundError(f"User role with ID {assignment_id} not found")
        await self._ensure_user(assignment.user_id)
        return assignment

    async def list_for_user(
        self, user_id: UUID, *, page_number: int = 1, page_size: int = 10
    ) -> Tuple[List[UserRole], int]:
        await self._ensure_user(user_id)
        return await self.uow.user_roles.get_paged(user_id, page_number=page_number, page_size=page_size)

    # PUBLIC_INTERFACE
    async def assign(self, payload: UserRoleCreate) -> UserRole:
        """Assign a role to a user; each (user, role) pair exists at most once."""
        await self._ensure_user(payload.user_id)
        if not await self.uow.user_roles.is_assignment_unique(payload.user_id, payload.role_id):
            raise ConflictError(f"Role {payload.role_id} is already assigned to user {payload.user_id}")
        assignment = UserRole(user_id=payload.user_id, role_id=payload.role_id)
        self._stamp_created(assignment)
        await self.uow.user_roles.add(assignment)
        await self.uow.save_changes()
        logger.info("Assigned role %s to user %s", payload.role_id, payload.user_id)
        return assignment

    # PUBLIC_INTERFACE
    async def remove(self, assignment_id: UUID) -> None:
        """Delete the assignment row."""
        assignment = await self.get(assignment_id)
        await self.uow.user_roles.remove(assignment)
        await self.uow.save_changes()
        logger.info("Removed role %s from user %s", assignment.role_id, assignment.user_id)
