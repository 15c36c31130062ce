from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Enum, MetaData, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Standardized naming convention for alembic-friendly constraints/indexes.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for audit columns."""
    return datetime.now(tz=timezone.utc)


class Base(DeclarativeBase):
    """Declarative base class with metadata naming conventions."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class RecordStatus(str, enum.Enum):
    """Lifecycle status shared by tenants and customers."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    BLOCKED = "Blocked"


class CustomerType(str, enum.Enum):
    """Kind of customer; drives how the display name is derived."""
    INDIVIDUAL = "Individual"
    CORPORATE = "Corporate"


class UUIDPkMixin:
    """
    Mixin that provides a UUID primary key.

    The id is assigned when the instance is constructed, so related rows can
    reference it before anything is flushed. The column default covers inserts
    that bypass the ORM constructor.
    """
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    def __init__(self, **kwargs) -> None:
        if kwargs.get("id") is None:
            kwargs["id"] = uuid.uuid4()
        super().__init__(**kwargs)


class CreatedAuditMixin:
    """Creation audit columns (append-only records use only these)."""
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)


class AuditMixin(CreatedAuditMixin):
    """Creation and modification audit columns."""
    modified_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    modified_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)


def string_enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Closed enumeration stored as its string value (no native DB enum type)."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
