"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by entity (tenant, customer, user, user role) and also
include the common response envelopes (single item, paged, error).
"""

from .common import ApiResponse, ErrorResponse, MessageResponse, PagedResponse  # noqa: F401
