from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from saas_platform.db.base import (
    AuditMixin,
    Base,
    CustomerType,
    RecordStatus,
    UUIDPkMixin,
    string_enum,
)


class Customer(UUIDPkMixin, AuditMixin, Base):
    """Customer or contact owned by a tenant."""
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("tenant_id", "customer_code", name="uq_customers_tenant_code"),
        CheckConstraint("credit_limit >= 0", name="credit_limit_non_negative"),
        CheckConstraint(
            "credit_score IS NULL OR (credit_score BETWEEN 300 AND 850)",
            name="credit_score_range",
        ),
    )

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    customer_type: Mapped[CustomerType] = mapped_column(
        string_enum(CustomerType, "customer_type"),
        nullable=False,
        default=CustomerType.INDIVIDUAL,
    )
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    mobile: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    customer_segment: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    customer_status: Mapped[RecordStatus] = mapped_column(
        string_enum(RecordStatus, "record_status"),
        nullable=False,
        default=RecordStatus.ACTIVE,
        index=True,
    )
    assigned_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    customer_source: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    tags: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    preferred_language: Mapped[str] = mapped_column(String(10), nullable=False, default="en")
    preferred_contact_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    credit_limit: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    credit_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def full_name(self) -> str:
        if self.customer_type == CustomerType.INDIVIDUAL:
            return f"{self.first_name or ''} {self.last_name or ''}".strip()
        return self.company_name or ""
