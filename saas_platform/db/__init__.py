"""
Database package initializer exposing key public interfaces for configuration,
engine/session management and connection retry.
"""

from .base import Base, CustomerType, RecordStatus
from .config import get_settings, Settings
from .session import (
    connect_with_retry,
    create_session_maker,
    get_engine,
    get_async_session,
    get_session_maker,
)

# Import models to ensure they are registered with SQLAlchemy metadata
# when the db package is imported.
from . import models as models  # noqa: F401

__all__ = [
    "Base",
    "CustomerType",
    "RecordStatus",
    "Settings",
    "get_settings",
    "connect_with_retry",
    "create_session_maker",
    "get_engine",
    "get_async_session",
    "get_session_maker",
    "models",
]
