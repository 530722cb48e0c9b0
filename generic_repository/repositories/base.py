"""
Base repository pattern implementation for database operations.

This module provides the query construction shared by the synchronous and
asynchronous generic repositories: filtering, eager loading of relationships
and ordering. Both repositories build the same SELECT statement here and only
differ in how they execute it against their session.
"""

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar, Union

from sqlalchemy import asc, desc, inspect, select
from sqlalchemy.orm import Load, Mapper, selectinload
from sqlalchemy.sql.expression import ColumnElement, Select

from generic_repository.exceptions import InvalidIncludePathError

# Type variable for the mapped entity class
T = TypeVar('T')

# A single relationship path or an ordered sequence of them
IncludePaths = Union[str, Sequence[str]]

class BaseRepository(Generic[T]):
    """
    Shared state and query building for the generic repositories.

    Attributes:
        session: SQLAlchemy session (sync or async) acting as the unit of work
        model (Type[T]): SQLAlchemy mapped class the repository is bound to
    """

    def __init__(self, session: Any, model: Type[T]):
        """
        Initialize the repository with a session and model class.

        Args:
            session: SQLAlchemy session owned by the caller
            model (Type[T]): SQLAlchemy mapped class
        """
        self.session = session
        self.model = model

    def __repr__(self):
        return f"<{type(self).__name__} {self.model.__name__}>"

    def _build_select(self,
                      where: Optional[ColumnElement[bool]] = None,
                      order_by: Optional[Any] = None,
                      include: Optional[IncludePaths] = None,
                      descending: bool = False) -> Select:
        """
        Build a SELECT for the bound model.

        Args:
            where: Boolean SQL expression to filter on
            order_by: Column expression to sort on
            include: Relationship path(s) to eager-load
            descending: Sort descending instead of ascending

        Returns:
            Select: The statement, not yet executed

        Raises:
            InvalidIncludePathError: If an include path cannot be resolved
        """
        statement = select(self.model)

        # SQL expressions have no truth value, compare against None only
        if where is not None:
            statement = statement.where(where)

        options = self._include_options(include)
        if options:
            statement = statement.options(*options)

        if order_by is not None:
            statement = statement.order_by(desc(order_by) if descending else asc(order_by))
        elif descending:
            statement = statement.order_by(
                *[desc(column) for column in inspect(self.model).primary_key]
            )

        return statement

    def _include_options(self, include: Optional[IncludePaths]) -> List[Load]:
        if include is None:
            return []
        if isinstance(include, str):
            include = [include]
        return [self._load_path(path) for path in include]

    def _load_path(self, path: str) -> Load:
        """
        Resolve a dotted relationship path into a chained selectinload option.

        ``"books.reviews"`` on ``Author`` becomes
        ``selectinload(Author.books).selectinload(Book.reviews)``.
        """
        mapper: Mapper = inspect(self.model)
        loader = None

        for segment in path.split('.'):
            segment = segment.strip()
            if not segment:
                raise InvalidIncludePathError(path, "empty path segment")

            if segment not in mapper.relationships:
                owner = mapper.class_.__name__
                if segment in mapper.attrs:
                    reason = f"'{segment}' on {owner} is not a relationship"
                else:
                    reason = f"{owner} has no attribute '{segment}'"
                raise InvalidIncludePathError(path, reason)

            attribute = getattr(mapper.class_, segment)
            loader = selectinload(attribute) if loader is None else loader.selectinload(attribute)
            mapper = mapper.relationships[segment].mapper

        return loader
