from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from .common import CamelModel


class UserRoleRead(CamelModel):
    """User-role assignment read model."""
    id: UUID = Field(..., description="Assignment ID")
    user_id: UUID = Field(...)
    role_id: UUID = Field(...)
    created_date: datetime = Field(...)
    created_by: Optional[UUID] = Field(None)


class UserRoleCreate(CamelModel):
    """Assign a role to a user."""
    user_id: UUID = Field(...)
    role_id: UUID = Field(...)
