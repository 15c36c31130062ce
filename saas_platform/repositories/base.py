from __future__ import annotations

from typing import Any, Generic, List, Optional, Sequence, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Executable, Select, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from saas_platform.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Generic CRUD repository over one mapped entity type.

    Note:
      Nothing here catches store errors; connectivity failures and constraint
      violations propagate to the caller exactly as the driver raised them.
      Writes are only staged on the session; the unit of work flushes them.
    """

    model: Type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def fetch_all(self, statement: Select) -> List[ModelT]:
        """Execute a select and materialize the rows."""
        return list(await self.scalars(statement))

    # Generic CRUD

    async def get_by_id(self, entity_id: UUID) -> Optional[ModelT]:
        """Primary-key lookup; None when no row matches."""
        return await self.session.get(self.model, entity_id)

    async def get_all(self) -> List[ModelT]:
        """Unfiltered read of the whole table. Intended for low-volume tables only."""
        return await self.fetch_all(select(self.model))

    async def add(self, entity: ModelT) -> None:
        """Stage a new row for insertion on the next flush."""
        self.session.add(entity)

    async def add_all(self, entities: Sequence[ModelT]) -> None:
        """Stage multiple rows for insertion."""
        self.session.add_all(list(entities))

    async def update(self, entity: ModelT) -> ModelT:
        """
        Mark an entity dirty for the next flush.

        The supplied object is taken as the desired final state. A detached
        instance is merged so its state replaces what the session tracks.
        Returns the instance tracked by the session.
        """
        if entity in self.session:
            return entity
        return await self.session.merge(entity)

    # Query helpers shared by entity repositories

    async def exists_where(self, *criteria: ColumnElement[bool]) -> bool:
        """True when at least one row matches all criteria."""
        stmt = select(exists().where(*criteria))
        result = await self.execute(stmt)
        return bool(result.scalar())

    async def count(self, statement: Select) -> int:
        """Count rows of a (filtered) select without materializing them."""
        stmt = select(func.count()).select_from(statement.order_by(None).subquery())
        result = await self.execute(stmt)
        return int(result.scalar_one())

    async def paginate(
        self, statement: Select, *, page_number: int, page_size: int
    ) -> Tuple[List[ModelT], int]:
        """
        Count the filtered statement, then fetch one page newest first.

        skip = (page_number - 1) * page_size. Range checking of page_number and
        page_size is the caller's responsibility.
        """
        total = await self.count(statement)
        stmt = (
            statement.order_by(self.model.created_date.desc(), self.model.id.desc())
            .offset((page_number - 1) * page_size)
            .limit(page_size)
        )
        return await self.fetch_all(stmt), total

    @staticmethod
    def ilike_any(term: str, *columns) -> ColumnElement[bool]:
        """Case-insensitive substring match of term against any of the columns."""
        return or_(*(column.icontains(term, autoescape=True) for column in columns))
