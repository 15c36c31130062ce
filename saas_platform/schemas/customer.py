from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional, Tuple
from uuid import UUID

from pydantic import EmailStr, Field, PastDate, model_validator

from saas_platform.db.base import CustomerType, RecordStatus
from .common import CODE_PATTERN, PHONE_PATTERN, CamelModel, PatchModel


# PUBLIC_INTERFACE
def customer_name_problem(
    customer_type: CustomerType,
    first_name: Optional[str],
    last_name: Optional[str],
    company_name: Optional[str],
) -> Optional[str]:
    """Return why the names do not fit the customer type, or None when they do."""
    if customer_type == CustomerType.INDIVIDUAL:
        if not (first_name and first_name.strip()):
            return "First name is required for individual customers"
        if not (last_name and last_name.strip()):
            return "Last name is required for individual customers"
    elif not (company_name and company_name.strip()):
        return "Company name is required for corporate customers"
    return None


class CustomerRead(CamelModel):
    """Customer read model."""
    id: UUID = Field(..., description="Customer ID")
    tenant_id: UUID = Field(..., description="Owning tenant")
    customer_code: str = Field(...)
    customer_type: CustomerType = Field(...)
    first_name: Optional[str] = Field(None)
    last_name: Optional[str] = Field(None)
    company_name: Optional[str] = Field(None)
    full_name: str = Field("", description="Personal name for individuals, company name for corporates")
    email: Optional[str] = Field(None)
    phone: Optional[str] = Field(None)
    mobile: Optional[str] = Field(None)
    date_of_birth: Optional[date] = Field(None)
    gender: Optional[str] = Field(None)
    address: Optional[str] = Field(None)
    city: Optional[str] = Field(None)
    state: Optional[str] = Field(None)
    country: Optional[str] = Field(None)
    postal_code: Optional[str] = Field(None)
    tax_id: Optional[str] = Field(None)
    customer_segment: Optional[str] = Field(None)
    customer_status: RecordStatus = Field(...)
    assigned_user_id: Optional[UUID] = Field(None)
    customer_source: Optional[str] = Field(None)
    tags: Optional[str] = Field(None)
    preferred_language: str = Field("en")
    preferred_contact_method: Optional[str] = Field(None)
    credit_limit: Decimal = Field(...)
    credit_score: Optional[int] = Field(None)
    is_active: bool = Field(...)
    created_date: datetime = Field(...)
    created_by: Optional[UUID] = Field(None)
    modified_date: Optional[datetime] = Field(None)
    modified_by: Optional[UUID] = Field(None)


class CustomerCreate(CamelModel):
    """Create customer payload. The owning tenant comes from the request context."""
    customer_code: str = Field(..., min_length=1, max_length=50, pattern=CODE_PATTERN)
    customer_type: CustomerType = Field(CustomerType.INDIVIDUAL)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    company_name: Optional[str] = Field(None, max_length=200)
    email: EmailStr = Field(..., max_length=255)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    mobile: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    date_of_birth: Optional[PastDate] = Field(None)
    gender: Optional[str] = Field(None, max_length=10)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    tax_id: Optional[str] = Field(None, max_length=50)
    customer_segment: Optional[str] = Field(None, max_length=50)
    customer_status: RecordStatus = Field(RecordStatus.ACTIVE)
    assigned_user_id: Optional[UUID] = Field(None)
    customer_source: Optional[str] = Field(None, max_length=50)
    tags: Optional[str] = Field(None, max_length=500)
    preferred_language: str = Field("en", max_length=10)
    preferred_contact_method: Optional[str] = Field(None, max_length=20)
    credit_limit: Decimal = Field(Decimal("0"), ge=0, max_digits=18, decimal_places=2)
    credit_score: Optional[int] = Field(None, ge=300, le=850, description="300-850 inclusive, or unset")

    @model_validator(mode="after")
    def _check_names_for_type(self):
        problem = customer_name_problem(self.customer_type, self.first_name, self.last_name, self.company_name)
        if problem:
            raise ValueError(problem)
        return self


class CustomerUpdate(PatchModel):
    """Partial update payload; customer code, type and tenant are immutable."""
    non_nullable: ClassVar[Tuple[str, ...]] = (
        "customer_status",
        "preferred_language",
        "credit_limit",
        "is_active",
    )

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    company_name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    mobile: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    date_of_birth: Optional[PastDate] = Field(None)
    gender: Optional[str] = Field(None, max_length=10)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    tax_id: Optional[str] = Field(None, max_length=50)
    customer_segment: Optional[str] = Field(None, max_length=50)
    customer_status: Optional[RecordStatus] = Field(None)
    assigned_user_id: Optional[UUID] = Field(None)
    customer_source: Optional[str] = Field(None, max_length=50)
    tags: Optional[str] = Field(None, max_length=500)
    preferred_language: Optional[str] = Field(None, max_length=10)
    preferred_contact_method: Optional[str] = Field(None, max_length=20)
    credit_limit: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    credit_score: Optional[int] = Field(None, ge=300, le=850, description="300-850 inclusive, or unset")
    is_active: Optional[bool] = Field(None)
