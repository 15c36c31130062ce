"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for one entity each and only stage
changes on the shared AsyncSession; the UnitOfWork decides when they are
flushed and committed. Tenant-owned repositories take the tenant id explicitly.
"""

from .base import BaseRepository
from .customer import CustomerRepository
from .tenant import TenantRepository
from .unit_of_work import UnitOfWork
from .user import UserRepository
from .user_role import UserRoleRepository

__all__ = [
    "BaseRepository",
    "CustomerRepository",
    "TenantRepository",
    "UnitOfWork",
    "UserRepository",
    "UserRoleRepository",
]
