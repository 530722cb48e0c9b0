"""
Generic repository over a synchronous SQLAlchemy session.

This module provides a CRUD facade that works for any mapped class. Every
operation forwards to the session's query or change-tracking API. Mutations
are only staged: nothing is written until the caller commits the session.

Usage:
    with SessionLocal() as session:
        authors = GenericRepository(session, Author)
        authors.create(Author(name="Ursula"))
        session.commit()
"""

import logging
from typing import Any, Iterable, Iterator, List, Optional, Type

from sqlalchemy import inspect
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import ColumnElement, Select

from generic_repository.exceptions import InvalidArgumentError
from generic_repository.repositories.base import BaseRepository, IncludePaths, T

logger = logging.getLogger(__name__)

class GenericRepository(BaseRepository[T]):
    """
    Generic repository for database operations.

    To persist staged changes the caller must commit the session itself;
    the repository never commits, flushes or rolls back.

    Attributes:
        session (Session): SQLAlchemy session acting as the unit of work
        model (Type[T]): SQLAlchemy mapped class
    """

    session: Session

    def __init__(self, session: Session, model: Type[T]):
        super().__init__(session, model)

    def get_all(self,
                where: Optional[ColumnElement[bool]] = None,
                order_by: Optional[Any] = None,
                include: Optional[IncludePaths] = None,
                descending: bool = False) -> Iterator[T]:
        """
        Get the entities matching an optional filter.

        The query runs once the returned iterator is first advanced, e.g. by
        looping over it or passing it to ``list()``.

        Args:
            where: Boolean SQL expression to filter on, e.g. ``Author.age > 30``
            order_by: Column expression to sort on
            include: Relationship path(s) to eager-load, e.g. ``["books.reviews"]``
            descending: Sort descending. Without ``order_by`` the primary key is used.

        Returns:
            Iterator[T]: Lazily evaluated entities

        Raises:
            InvalidIncludePathError: If an include path cannot be resolved
        """
        statement = self._build_select(where, order_by, include, descending)
        return self._iterate(statement)

    def _iterate(self, statement: Select) -> Iterator[T]:
        logger.debug(f"Querying {self.model.__name__}")
        yield from self.session.scalars(statement)

    def get_first_or_default(self,
                             where: ColumnElement[bool],
                             include: Optional[IncludePaths] = None) -> Optional[T]:
        """
        Get the first entity matching the filter.

        Args:
            where: Boolean SQL expression to filter on (required)
            include: Relationship path(s) to eager-load

        Returns:
            Optional[T]: The first match, or None if nothing matches

        Raises:
            InvalidArgumentError: If no filter is given
        """
        if where is None:
            raise InvalidArgumentError("where")

        statement = self._build_select(where, include=include).limit(1)
        return self.session.scalars(statement).first()

    def get_by_primary_key(self, pk: Any) -> Optional[T]:
        """
        Get an entity by primary key.

        The identity map is checked first, so an entity already loaded or
        staged in this session is returned without a query.

        Args:
            pk: Primary key value, or a tuple for composite keys

        Returns:
            Optional[T]: Model instance if found, None otherwise
        """
        return self.session.get(self.model, pk)

    def create(self, entity: T) -> None:
        """Stage an entity for insertion."""
        self.session.add(entity)
        logger.debug(f"Staged {self.model.__name__} for insertion")

    def create_all(self, entities: Iterable[T]) -> None:
        """Stage several entities for insertion."""
        entities = list(entities)
        self.session.add_all(entities)
        logger.debug(f"Staged {len(entities)} {self.model.__name__} entities for insertion")

    def update(self, entity: T) -> T:
        """
        Stage an entity for update.

        The entity's state is merged into the session, so detached or freshly
        built instances carrying a primary key are reconciled with the row.

        Args:
            entity (T): Model instance holding the new values

        Returns:
            T: The instance tracked by the session
        """
        merged = self.session.merge(entity)
        logger.debug(f"Staged {self.model.__name__} for update")
        return merged

    def update_all(self, entities: Iterable[T]) -> List[T]:
        """Stage several entities for update and return the tracked instances."""
        return [self.update(entity) for entity in entities]

    def delete(self, entity: T) -> None:
        """
        Stage an entity for removal.

        An entity that was added but never flushed is removed from the
        session instead, cancelling its pending insert.

        Args:
            entity (T): Model instance to remove
        """
        if inspect(entity).pending:
            self.session.expunge(entity)
            logger.debug(f"Cancelled pending insertion of {self.model.__name__}")
            return

        self.session.delete(entity)
        logger.debug(f"Staged {self.model.__name__} for removal")

    def delete_all(self, entities: Iterable[T]) -> None:
        """Stage several entities for removal."""
        for entity in entities:
            self.delete(entity)
