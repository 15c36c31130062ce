from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from saas_platform.db.base import AuditMixin, Base, RecordStatus, UUIDPkMixin, string_enum


class Tenant(UUIDPkMixin, AuditMixin, Base):
    """Isolated customer organization of the platform; scopes most other records."""
    __tablename__ = "tenants"

    tenant_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    tenant_code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    subscription_plan_id: Mapped[str] = mapped_column(String(50), nullable=False)
    tenant_status: Mapped[RecordStatus] = mapped_column(
        string_enum(RecordStatus, "record_status"),
        nullable=False,
        default=RecordStatus.ACTIVE,
        index=True,
    )
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    mobile: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    subscription_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    subscription_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    max_users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_storage_gb: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
