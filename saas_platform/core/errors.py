from __future__ import annotations

from enum import Enum
from typing import List, Optional


class ErrorCode(str, Enum):
    UNAUTHORIZED = "unauthorized"          # 401
    FORBIDDEN = "forbidden"                # 403
    NOT_FOUND = "not_found"                # 404
    CONFLICT = "conflict"                  # 409
    VALIDATION_ERROR = "validation_error"  # 422
    HTTP_ERROR = "http_error"
    STORE_UNAVAILABLE = "store_unavailable"  # 503
    INTERNAL_ERROR = "internal_error"      # 500


class DomainError(Exception):
    """
    Base class for failures raised by the service layer.

    Repositories and the unit of work never raise these; translation to an
    HTTP response happens in the API exception handlers.
    """

    status_code: int = 500
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class NotFoundError(DomainError):
    """Requested identifier or code has no matching row."""
    status_code = 404
    code = ErrorCode.NOT_FOUND


class ConflictError(DomainError):
    """A uniqueness rule (code, username, assignment) would be violated."""
    status_code = 409
    code = ErrorCode.CONFLICT


class TransactionStateError(DomainError):
    """Unit of work used out of order, e.g. nested begin_transaction()."""


class AuthenticationError(DomainError):
    """Credentials or refresh token rejected."""
    status_code = 401
    code = ErrorCode.UNAUTHORIZED


class ForbiddenError(DomainError):
    """Authenticated caller is not allowed to act on the requested tenant."""
    status_code = 403
    code = ErrorCode.FORBIDDEN


class BusinessRuleError(DomainError):
    """The merged state of an update would break an entity rule."""
    status_code = 422
    code = ErrorCode.VALIDATION_ERROR
