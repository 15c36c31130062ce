from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError

from saas_platform.core.errors import AuthenticationError, ForbiddenError
from saas_platform.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from saas_platform.core.settings import get_app_settings
from saas_platform.db.base import utcnow
from saas_platform.db.models.user import User
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.auth import TokenPair
from .base import BaseService

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # Some stores hand back naive datetimes for timezone-aware columns.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class AuthService(BaseService):
    """
    Login bookkeeping for users of one tenant.

    A successful login records the login time, resets the failed-attempt
    counter and stores the issued refresh token. A refresh token is accepted
    once: refreshing rotates it, logout clears it.
    """

    def __init__(self, uow: UnitOfWork, tenant_id: UUID) -> None:
        super().__init__(uow)
        self.tenant_id = tenant_id

    async def _find_user(self, login: str) -> Optional[User]:
        user = await self.uow.users.get_by_username(self.tenant_id, login)
        if user is None:
            matches = await self.uow.users.get_by_email(login, tenant_id=self.tenant_id)
            user = matches[0] if matches else None
        return user

    async def _issue_tokens(self, user: User) -> TokenPair:
        settings = get_app_settings()
        roles = [str(assignment.role_id) for assignment in await self.uow.user_roles.get_by_user_id(user.id)]
        access = create_access_token(subject=str(user.id), tenant_id=str(user.tenant_id), roles=roles)
        refresh = create_refresh_token(subject=str(user.id), tenant_id=str(user.tenant_id))
        user.refresh_token = refresh
        user.refresh_token_expiry_time = utcnow() + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
        return TokenPair(access_token=access, refresh_token=refresh)

    # PUBLIC_INTERFACE
    async def login(self, login: str, password: str) -> TokenPair:
        """Authenticate by username or email and issue a token pair."""
        user = await self._find_user(login)
        if user is None or not user.password_hash:
            raise AuthenticationError("Invalid credentials")
        if not verify_password(password, user.password_hash):
            user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
            await self.uow.save_changes()
            logger.warning("Failed login for user %s (%d attempts)", user.id, user.failed_login_attempts)
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthenticationError("User is inactive")

        user.failed_login_attempts = 0
        user.last_login_date = utcnow()
        tokens = await self._issue_tokens(user)
        await self.uow.save_changes()
        logger.info("User %s logged in", user.id)
        return tokens

    # PUBLIC_INTERFACE
    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange the current refresh token for a new token pair."""
        try:
            claims = decode_token(refresh_token, expected_type="refresh")
            user_id = UUID(str(claims["sub"]))
        except (JWTError, KeyError, ValueError):
            raise AuthenticationError("Invalid refresh token")
        if str(claims.get("tenant_id")) != str(self.tenant_id):
            raise ForbiddenError("Tenant mismatch")

        user = await self.uow.users.get_by_id(user_id)
        if user is None or user.tenant_id != self.tenant_id or not user.is_active:
            raise AuthenticationError("User not found or inactive")
        if user.refresh_token != refresh_token:
            raise AuthenticationError("Refresh token has been revoked")
        expiry = user.refresh_token_expiry_time
        if expiry is None or _as_utc(expiry) <= utcnow():
            raise AuthenticationError("Refresh token has expired")

        tokens = await self._issue_tokens(user)
        await self.uow.save_changes()
        return tokens

    # PUBLIC_INTERFACE
    async def logout(self, user_id: UUID) -> None:
        """End the session: record the logout time and revoke the refresh token."""
        user = await self.uow.users.get_by_id(user_id)
        if user is None or user.tenant_id != self.tenant_id:
            raise AuthenticationError("User not found")
        user.logout_end_date = utcnow()
        user.refresh_token = None
        user.refresh_token_expiry_time = None
        await self.uow.save_changes()
        logger.info("User %s logged out", user.id)
