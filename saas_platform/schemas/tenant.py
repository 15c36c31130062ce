from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional, Tuple
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from saas_platform.db.base import RecordStatus
from .common import CODE_PATTERN, PHONE_PATTERN, CamelModel, PatchModel


# PUBLIC_INTERFACE
def subscription_window_problem(start: Optional[date], end: Optional[date]) -> Optional[str]:
    """Return why the subscription window is invalid, or None."""
    if start and end and end < start:
        return "Subscription end date must not precede the start date"
    return None


class TenantRead(CamelModel):
    """Tenant read model."""
    id: UUID = Field(..., description="Tenant ID")
    tenant_name: Optional[str] = Field(None)
    tenant_code: str = Field(..., description="System-wide unique tenant code")
    subscription_plan_id: str = Field(...)
    tenant_status: RecordStatus = Field(...)
    contact_email: Optional[str] = Field(None)
    contact_phone: Optional[str] = Field(None)
    mobile: Optional[str] = Field(None)
    address: Optional[str] = Field(None)
    city: Optional[str] = Field(None)
    state: Optional[str] = Field(None)
    country: Optional[str] = Field(None)
    postal_code: Optional[str] = Field(None)
    is_active: bool = Field(...)
    subscription_start_date: Optional[date] = Field(None)
    subscription_end_date: Optional[date] = Field(None)
    max_users: int = Field(...)
    max_storage_gb: int = Field(...)
    created_date: datetime = Field(..., description="Created timestamp")
    created_by: Optional[UUID] = Field(None)
    modified_date: Optional[datetime] = Field(None)
    modified_by: Optional[UUID] = Field(None)


class TenantCreate(CamelModel):
    """Create tenant payload."""
    tenant_name: Optional[str] = Field(None, max_length=200)
    tenant_code: str = Field(..., min_length=1, max_length=50, pattern=CODE_PATTERN)
    subscription_plan_id: str = Field(..., min_length=1, max_length=50)
    tenant_status: RecordStatus = Field(RecordStatus.ACTIVE)
    contact_email: EmailStr = Field(..., max_length=255)
    contact_phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    mobile: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    subscription_start_date: Optional[date] = Field(None)
    subscription_end_date: Optional[date] = Field(None)
    max_users: int = Field(0, ge=0)
    max_storage_gb: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_subscription_window(self):
        problem = subscription_window_problem(self.subscription_start_date, self.subscription_end_date)
        if problem:
            raise ValueError(problem)
        return self


class TenantUpdate(PatchModel):
    """Partial update payload; the tenant code is immutable."""
    non_nullable: ClassVar[Tuple[str, ...]] = (
        "subscription_plan_id",
        "tenant_status",
        "is_active",
        "max_users",
        "max_storage_gb",
    )

    tenant_name: Optional[str] = Field(None, max_length=200)
    subscription_plan_id: Optional[str] = Field(None, min_length=1, max_length=50)
    tenant_status: Optional[RecordStatus] = Field(None)
    contact_email: Optional[EmailStr] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    mobile: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = Field(None)
    subscription_start_date: Optional[date] = Field(None)
    subscription_end_date: Optional[date] = Field(None)
    max_users: Optional[int] = Field(None, ge=0)
    max_storage_gb: Optional[int] = Field(None, ge=0)
