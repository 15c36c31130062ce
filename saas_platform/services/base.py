from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from saas_platform.db.base import Base, utcnow
from saas_platform.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class BaseService:
    """
    Base class for services. Holds the unit of work shared by all repositories
    touched during one request, plus the acting user for audit columns.

    Services keep business rules and orchestration, delegating data access
    to repositories and durability to the unit of work.
    """

    def __init__(self, uow: UnitOfWork, actor_id: Optional[UUID] = None) -> None:
        self.uow = uow
        self.actor_id = actor_id

    def _stamp_created(self, entity: Base) -> None:
        entity.created_date = utcnow()
        entity.created_by = self.actor_id

    def _apply_changes(self, entity: Base, changes: Dict[str, Any]) -> None:
        """Copy the supplied fields onto the entity and stamp modification audit."""
        for name, value in changes.items():
            setattr(entity, name, value)
        entity.modified_date = utcnow()
        entity.modified_by = self.actor_id
