from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# E.164-style phone numbers, optional leading +.
PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"
# Upper-case business codes such as tenant and customer codes.
CODE_PATTERN = r"^[A-Z0-9-]+$"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys; accepts snake_case input too."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PatchModel(CamelModel):
    """
    Partial-update payload.

    Only fields present in the request are applied: an omitted field leaves the
    stored value alone, an explicit null clears it. Fields listed in
    `non_nullable` map to NOT NULL columns and may be omitted but never nulled.
    """

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_for_required(self):
        nulled = [
            name
            for name in self.non_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulled))}")
        return self

    def changes(self) -> Dict[str, Any]:
        """Field name -> new value for every field the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class MessageResponse(CamelModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


# PUBLIC_INTERFACE
class ApiResponse(CamelModel, Generic[T]):
    """Single-item envelope returned by every non-paged endpoint."""
    success: bool = Field(True, description="Whether the operation succeeded")
    message: str = Field("Operation successful", description="Human readable message")
    data: Optional[T] = Field(None, description="Payload")
    errors: List[str] = Field(default_factory=list, description="Error messages, if any")
    timestamp: datetime = Field(default_factory=_utcnow, description="Response timestamp (UTC)")

    @classmethod
    def ok(cls, data: Any = None, message: str = "Operation successful") -> "ApiResponse":
        return cls(success=True, message=message, data=data)


# PUBLIC_INTERFACE
class PagedResponse(CamelModel, Generic[T]):
    """
    Paged envelope. totalPages and the previous/next flags are derived from
    pageNumber, pageSize and totalRecords on every serialization.
    """
    success: bool = Field(True)
    message: str = Field("Data retrieved successfully")
    data: List[T] = Field(default_factory=list, description="Items of the current page")
    page_number: int = Field(..., ge=1, description="1-based page number")
    page_size: int = Field(..., ge=1, description="Requested page size")
    total_records: int = Field(..., ge=0, description="Total records matching the filters")
    timestamp: datetime = Field(default_factory=_utcnow)

    @computed_field(alias="totalPages")  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_records / self.page_size)

    @computed_field(alias="hasPreviousPage")  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field(alias="hasNextPage")  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @classmethod
    def build(
        cls,
        items: Sequence[Any],
        *,
        page_number: int,
        page_size: int,
        total_records: int,
        message: str = "Data retrieved successfully",
    ) -> "PagedResponse":
        return cls(
            message=message,
            data=list(items),
            page_number=page_number,
            page_size=page_size,
            total_records=total_records,
        )


# PUBLIC_INTERFACE
class ErrorResponse(ApiResponse[None]):
    """Standardized error envelope returned by the exception handlers."""
    success: bool = Field(False)
    status: int = Field(..., description="HTTP status code")
    error_type: str = Field(..., description="Machine-readable error type code")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    tenant_id: Optional[str] = Field(default=None, description="Tenant ID (if available)")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")


class HealthResponse(CamelModel):
    """Liveness/readiness probe result."""
    status: str = Field(..., description="ok or degraded")
    database: bool = Field(..., description="Whether the database answered")
