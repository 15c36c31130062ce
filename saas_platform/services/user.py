from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from saas_platform.core.errors import ConflictError, NotFoundError
from saas_platform.core.security import get_password_hash
from saas_platform.db.models.user import User, UserRole
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.user import UserCreate, UserUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """User administration within one tenant."""

    def __init__(self, uow: UnitOfWork, tenant_id: UUID, actor_id: Optional[UUID] = None) -> None:
        super().__init__(uow, actor_id)
        self.tenant_id = tenant_id

    async def get(self, user_id: UUID) -> User:
        user = await self.uow.users.get_by_id(user_id)
        if user is None or user.tenant_id != self.tenant_id:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    async def role_ids(self, user_id: UUID) -> List[UUID]:
        return [assignment.role_id for assignment in await self.uow.user_roles.get_by_user_id(user_id)]

    async def list_active(self) -> List[User]:
        return await self.uow.users.get_active(self.tenant_id)

    async def search(self, term: str) -> List[User]:
        return await self.uow.users.search(self.tenant_id, term)

    async def list_paged(
        self,
        *,
        search_term: Optional[str] = None,
        is_active: Optional[bool] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[User], int]:
        return await self.uow.users.get_paged(
            self.tenant_id,
            search_term=search_term,
            is_active=is_active,
            page_number=page_number,
            page_size=page_size,
        )

    async def _ensure_unique(
        self, *, username: Optional[str], email: Optional[str], exclude_id: Optional[UUID] = None
    ) -> None:
        users = self.uow.users
        if username is not None and not await users.is_username_unique(self.tenant_id, username, exclude_id):
            raise ConflictError(f"Username {username} already exists")
        if email is not None and not await users.is_email_unique(self.tenant_id, email, exclude_id):
            raise ConflictError(f"Email {email} already exists")

    # PUBLIC_INTERFACE
    async def create(self, payload: UserCreate) -> User:
        """
        Create a user and its initial role assignments atomically.

        The user row and every role assignment are written in one explicit
        transaction; a failure on any of them leaves no trace of the others.
        """
        if await self.uow.tenants.get_by_id(self.tenant_id) is None:
            raise NotFoundError(f"Tenant with ID {self.tenant_id} not found")
        await self._ensure_unique(username=payload.username, email=payload.email)

        data = payload.model_dump(exclude={"password", "role_ids"})
        user = User(**data, tenant_id=self.tenant_id, password_hash=get_password_hash(payload.password))
        self._stamp_created(user)

        await self.uow.begin_transaction()
        try:
            await self.uow.users.add(user)
            await self.uow.save_changes()
            assignments = []
            for role_id in dict.fromkeys(payload.role_ids):
                assignment = UserRole(user_id=user.id, role_id=role_id)
                self._stamp_created(assignment)
                assignments.append(assignment)
            await self.uow.user_roles.add_all(assignments)
            await self.uow.commit()
        except BaseException:
            await self.uow.rollback()
            raise
        logger.info("Created user %s with %d role(s)", user.id, len(assignments))
        return user

    # PUBLIC_INTERFACE
    async def update(self, user_id: UUID, payload: UserUpdate) -> User:
        """Apply only the fields present in the payload; a new password is re-hashed."""
        user = await self.get(user_id)
        changes = payload.changes()
        await self._ensure_unique(
            username=changes.get("username"), email=changes.get("email"), exclude_id=user.id
        )
        if "password" in changes:
            changes["password_hash"] = get_password_hash(changes.pop("password"))
        self._apply_changes(user, changes)
        user = await self.uow.users.update(user)
        await self.uow.save_changes()
        logger.info("Updated user %s", user.id)
        return user

    # PUBLIC_INTERFACE
    async def deactivate(self, user_id: UUID) -> None:
        """Soft delete: the user can no longer log in and keeps its history."""
        user = await self.get(user_id)
        self._apply_changes(user, {"is_active": False, "refresh_token": None, "refresh_token_expiry_time": None})
        await self.uow.users.update(user)
        await self.uow.save_changes()
        logger.info("Deactivated user %s", user.id)
