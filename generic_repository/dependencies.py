"""
FastAPI dependency providers for the generic repositories.

Each provider binds a repository to the session of the current request, so
the repository shares its unit of work with any other dependency that asks
for ``get_db`` (FastAPI caches dependencies per request).

Usage:
    @router.post("/authors")
    def create_author(payload: AuthorIn,
                      authors: GenericRepository[Author] = Depends(get_repository(Author)),
                      db: Session = Depends(get_db)):
        authors.create(Author(**payload.model_dump()))
        db.commit()
"""

from typing import Callable, Type

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from generic_repository.database import get_async_db, get_db
from generic_repository.repositories.async_generic import AsyncGenericRepository
from generic_repository.repositories.base import T
from generic_repository.repositories.generic import GenericRepository

def get_repository(model: Type[T]) -> Callable[..., GenericRepository[T]]:
    """
    Build a dependency that yields a GenericRepository for the model.

    Args:
        model: SQLAlchemy mapped class

    Returns:
        A callable suitable for ``Depends``
    """
    def _get_repository(db: Session = Depends(get_db)) -> GenericRepository[T]:
        return GenericRepository(db, model)

    return _get_repository

def get_async_repository(model: Type[T]) -> Callable[..., AsyncGenericRepository[T]]:
    """Build a dependency that yields an AsyncGenericRepository for the model."""
    def _get_async_repository(db: AsyncSession = Depends(get_async_db)) -> AsyncGenericRepository[T]:
        return AsyncGenericRepository(db, model)

    return _get_async_repository
