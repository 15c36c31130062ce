from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from saas_platform.core.deps import Principal, get_tenant_id, get_tenant_principal, get_unit_of_work
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.auth import RefreshRequest, TokenPair
from saas_platform.schemas.common import ApiResponse, MessageResponse
from saas_platform.schemas.user import UserRead
from saas_platform.services.auth import AuthService
from saas_platform.services.user import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=TokenPair,
    summary="Login",
    description="Authenticate with username or email via the OAuth2 password form and receive access/refresh tokens.",
)
async def login_for_tokens(
    form_data: OAuth2PasswordRequestForm = Depends(),
    tenant_id: UUID = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> TokenPair:
    """Authenticate user and issue tokens."""
    return await AuthService(uow, tenant_id).login(form_data.username, form_data.password)


# PUBLIC_INTERFACE
@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh access token",
    description="Exchange the current refresh token for a new pair. The old refresh token stops working.",
)
async def refresh_token(
    payload: RefreshRequest,
    tenant_id: UUID = Depends(get_tenant_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> TokenPair:
    """Validate refresh token and issue a new access token pair."""
    return await AuthService(uow, tenant_id).refresh(payload.refresh_token)


# PUBLIC_INTERFACE
@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Record the logout time and revoke the stored refresh token.",
)
async def logout(
    principal: Principal = Depends(get_tenant_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> MessageResponse:
    await AuthService(uow, principal.tenant_id).logout(principal.user_id)
    return MessageResponse(message="Logged out")


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=ApiResponse[UserRead],
    summary="Read current user",
    description="Return the current authenticated user and their role ids.",
)
async def read_current_user(
    principal: Principal = Depends(get_tenant_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ApiResponse[UserRead]:
    service = UserService(uow, principal.tenant_id)
    user = await service.get(principal.user_id)
    read = UserRead.model_validate(user)
    read.role_ids = await service.role_ids(user.id)
    return ApiResponse[UserRead].ok(read)
