"""
Generic repository over an asynchronous SQLAlchemy session.

Same contract as GenericRepository, with the I/O bound operations awaited so
the driver (aiosqlite, asyncpg) can run without blocking the event loop.
"""

import logging
from typing import Any, AsyncIterator, Awaitable, Iterable, List, Optional, Type

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import ColumnElement, Select

from generic_repository.exceptions import InvalidArgumentError
from generic_repository.repositories.base import BaseRepository, IncludePaths, T

logger = logging.getLogger(__name__)

class AsyncGenericRepository(BaseRepository[T]):
    """
    Generic repository for async database operations.

    The caller commits the session; the repository only stages changes.
    """

    session: AsyncSession

    def __init__(self, session: AsyncSession, model: Type[T]):
        super().__init__(session, model)

    def get_all(self,
                where: Optional[ColumnElement[bool]] = None,
                order_by: Optional[Any] = None,
                include: Optional[IncludePaths] = None,
                descending: bool = False) -> AsyncIterator[T]:
        """
        Get the entities matching an optional filter.

        The statement is built immediately, so include path errors surface
        here; the query itself runs on the first ``async for`` step.

        Args:
            where: Boolean SQL expression to filter on
            order_by: Column expression to sort on
            include: Relationship path(s) to eager-load
            descending: Sort descending. Without ``order_by`` the primary key is used.

        Returns:
            AsyncIterator[T]: Entities to consume with ``async for``
        """
        statement = self._build_select(where, order_by, include, descending)
        return self._iterate(statement)

    async def _iterate(self, statement: Select) -> AsyncIterator[T]:
        logger.debug(f"Querying {self.model.__name__}")
        result = await self.session.scalars(statement)
        for entity in result:
            yield entity

    def get_first_or_default(self,
                             where: ColumnElement[bool],
                             include: Optional[IncludePaths] = None) -> Awaitable[Optional[T]]:
        """
        Get the first entity matching the filter.

        Not a coroutine function itself: a missing filter raises
        InvalidArgumentError at call time, before anything is awaited.

        Returns:
            Awaitable[Optional[T]]: The first match, or None
        """
        if where is None:
            raise InvalidArgumentError("where")

        statement = self._build_select(where, include=include).limit(1)
        return self._first(statement)

    async def _first(self, statement: Select) -> Optional[T]:
        result = await self.session.scalars(statement)
        return result.first()

    async def get_by_primary_key(self, pk: Any) -> Optional[T]:
        """Get an entity by primary key, or None if no row has that key."""
        return await self.session.get(self.model, pk)

    async def create(self, entity: T) -> None:
        """Stage an entity for insertion."""
        self.session.add(entity)
        logger.debug(f"Staged {self.model.__name__} for insertion")

    async def create_all(self, entities: Iterable[T]) -> None:
        """Stage several entities for insertion."""
        entities = list(entities)
        self.session.add_all(entities)
        logger.debug(f"Staged {len(entities)} {self.model.__name__} entities for insertion")

    async def update(self, entity: T) -> T:
        """Merge an entity into the session and return the tracked instance."""
        merged = await self.session.merge(entity)
        logger.debug(f"Staged {self.model.__name__} for update")
        return merged

    async def update_all(self, entities: Iterable[T]) -> List[T]:
        return [await self.update(entity) for entity in entities]

    async def delete(self, entity: T) -> None:
        """Stage an entity for removal, or cancel its insertion if still pending."""
        if inspect(entity).pending:
            self.session.expunge(entity)
            logger.debug(f"Cancelled pending insertion of {self.model.__name__}")
            return

        await self.session.delete(entity)
        logger.debug(f"Staged {self.model.__name__} for removal")

    async def delete_all(self, entities: Iterable[T]) -> None:
        for entity in entities:
            await self.delete(entity)
