"""
ORM models for tenants, customers, users and user-role assignments.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .tenant import Tenant  # noqa: F401
from .customer import Customer  # noqa: F401
from .user import User, UserRole  # noqa: F401
