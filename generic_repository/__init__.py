"""
Generic repository for SQLAlchemy.

Exposes CRUD operations over any mapped class, forwarding to a caller-owned
session. Changes are staged only; commit the session to persist them.
"""

from generic_repository.exceptions import InvalidArgumentError, InvalidIncludePathError, RepositoryError
from generic_repository.repositories import AsyncGenericRepository, BaseRepository, GenericRepository

__version__ = "0.1.0"

__all__ = [
    'GenericRepository',
    'AsyncGenericRepository',
    'BaseRepository',
    'RepositoryError',
    'InvalidArgumentError',
    'InvalidIncludePathError',
]
