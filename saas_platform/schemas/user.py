from __future__ import annotations

from datetime import datetime
from typing import ClassVar, List, Optional, Tuple
from uuid import UUID

from pydantic import EmailStr, Field

from .common import PHONE_PATTERN, CamelModel, PatchModel


class UserRead(CamelModel):
    """User read model. Credentials and tokens are never exposed."""
    id: UUID = Field(..., description="User ID")
    tenant_id: UUID = Field(...)
    username: str = Field(...)
    email: EmailStr = Field(...)
    first_name: Optional[str] = Field(None)
    last_name: Optional[str] = Field(None)
    phone_number: Optional[str] = Field(None)
    profile_image_url: Optional[str] = Field(None)
    is_active: bool = Field(...)
    is_email_verified: bool = Field(...)
    last_login_date: Optional[datetime] = Field(None)
    failed_login_attempts: int = Field(0)
    logout_end_date: Optional[datetime] = Field(None)
    created_date: datetime = Field(...)
    created_by: Optional[UUID] = Field(None)
    modified_date: Optional[datetime] = Field(None)
    modified_by: Optional[UUID] = Field(None)
    role_ids: List[UUID] = Field(default_factory=list, description="Roles assigned to the user")


class UserCreate(CamelModel):
    """Create user payload. The owning tenant comes from the request context."""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=72)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    role_ids: List[UUID] = Field(default_factory=list, description="Roles to assign on creation")


class UserUpdate(PatchModel):
    """Partial update payload."""
    non_nullable: ClassVar[Tuple[str, ...]] = ("username", "email", "password", "is_active", "is_email_verified")

    username: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = Field(None, max_length=255)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = Field(None)
    is_email_verified: Optional[bool] = Field(None)
