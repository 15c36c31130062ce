from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

from saas_platform.core.errors import TransactionStateError
from .customer import CustomerRepository
from .tenant import TenantRepository
from .user import UserRepository
from .user_role import UserRoleRepository

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    One persistence session per logical operation.

    All repositories are built up front and bound to the same AsyncSession, so
    changes staged through any of them are flushed and committed together.

    States:
      Idle           save_changes() flushes and commits immediately.
      InTransaction  entered with begin_transaction(); save_changes() only
                     flushes, and nothing is durable until commit().

    Not safe for concurrent use; create one per request.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.tenants = TenantRepository(session)
        self.customers = CustomerRepository(session)
        self.users = UserRepository(session)
        self.user_roles = UserRoleRepository(session)
        self._transaction: Optional[AsyncSessionTransaction] = None
        self._closed = False

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            await self.rollback()
        await self.close()

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    def _pending_count(self) -> int:
        dirty = sum(1 for obj in self.session.dirty if self.session.is_modified(obj))
        return len(self.session.new) + dirty + len(self.session.deleted)

    # PUBLIC_INTERFACE
    async def save_changes(self) -> int:
        """
        Flush every staged insert, update and delete in one round-trip.

        Returns the number of affected entities. Outside an explicit transaction
        the flush is committed right away and a failure rolls the session back,
        so no partial state is visible to later reads. Inside a transaction the
        caller decides via commit()/rollback().
        """
        count = self._pending_count()
        if self.in_transaction:
            await self.session.flush()
            return count
        try:
            await self.session.flush()
            await self.session.commit()
        except BaseException:
            logger.warning("save_changes failed; rolling back session")
            await self.session.rollback()
            raise
        return count

    # PUBLIC_INTERFACE
    async def begin_transaction(self) -> None:
        """Start an explicit transaction (Idle -> InTransaction)."""
        if self.in_transaction:
            raise TransactionStateError("A transaction is already in progress")
        current = self.session.get_transaction()
        if current is not None:
            # Adopt the autobegun transaction so staged work stays uncommitted.
            self._transaction = current
        else:
            self._transaction = await self.session.begin()

    # PUBLIC_INTERFACE
    async def commit(self) -> None:
        """
        Flush pending changes and commit the explicit transaction.

        Any failure rolls the transaction back and is re-raised. The unit of
        work is Idle afterwards either way.
        """
        if not self.in_transaction:
            raise TransactionStateError("No transaction in progress")
        try:
            await self.save_changes()
            await self._transaction.commit()
        except BaseException:
            await self.rollback()
            raise
        finally:
            self._transaction = None

    # PUBLIC_INTERFACE
    async def rollback(self) -> None:
        """Discard the explicit transaction and every uncommitted change."""
        if self._transaction is not None:
            logger.info("Rolling back transaction")
            transaction, self._transaction = self._transaction, None
            if transaction.is_active:
                await transaction.rollback()
        if self.session.in_transaction():
            await self.session.rollback()

    # PUBLIC_INTERFACE
    async def close(self) -> None:
        """Release the session and any open transaction. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        if self._transaction is not None:
            await self.rollback()
        await self.session.close()
