from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AsyncGenerator, List, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from saas_platform.core.security import decode_token
from saas_platform.db.session import get_async_session
from saas_platform.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

# OAuth2 bearer (used by docs); login endpoint path referenced here
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


@dataclass(frozen=True)
class Principal:
    """Caller identity taken from a validated access token."""
    user_id: UUID
    tenant_id: UUID
    roles: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PageParams:
    """1-based page coordinates validated at the HTTP boundary."""
    page_number: int
    page_size: int


# PUBLIC_INTERFACE
def get_page_params(
    page_number: int = Query(1, ge=1, alias="pageNumber", description="1-based page number"),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize", description="Items per page (1-100)"),
) -> PageParams:
    """Read pageNumber/pageSize query parameters."""
    return PageParams(page_number=page_number, page_size=page_size)


# PUBLIC_INTERFACE
async def get_tenant_id(x_tenant_id: Optional[str] = Header(default=None, alias="X-Tenant-ID")) -> UUID:
    """
    Extract and validate the tenant id from the X-Tenant-ID header.

    Raises:
        HTTPException: 400 Bad Request if header missing or invalid UUID.
    Returns:
        UUID: tenant identifier
    """
    if not x_tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header is required.",
        )
    try:
        return UUID(x_tenant_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header must be a valid UUID string.",
        )


# PUBLIC_INTERFACE
async def get_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AsyncGenerator[UnitOfWork, None]:
    """
    Yield a UnitOfWork bound to a fresh session for the duration of the request.

    Uncommitted work is rolled back when the request fails; the session is
    always closed afterwards.
    """
    async with UnitOfWork(session) as uow:
        yield uow


# PUBLIC_INTERFACE
async def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    """Validate the bearer access token and return the caller identity."""
    try:
        payload = decode_token(token, expected_type="access")
        return Principal(
            user_id=UUID(str(payload["sub"])),
            tenant_id=UUID(str(payload["tenant_id"])),
            roles=list(payload.get("roles") or []),
        )
    except (JWTError, KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


# PUBLIC_INTERFACE
async def get_tenant_principal(
    tenant_id: UUID = Depends(get_tenant_id),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Principal:
    """
    Require that the token's tenant claim matches the X-Tenant-ID header and
    that the token still belongs to an active user of that tenant.

    Raises:
        HTTPException: 403 Forbidden on tenant mismatch, 401 Unauthorized when
        the user is unknown or deactivated.
    """
    if principal.tenant_id != tenant_id:
        logger.warning("Tenant mismatch: token=%s header=%s", principal.tenant_id, tenant_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Tenant mismatch")
    user = await uow.users.get_by_id(principal.user_id)
    if user is None or user.tenant_id != tenant_id or not user.is_active:
        logger.info("Rejected token of inactive or unknown user %s", principal.user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User is inactive or unknown",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal
