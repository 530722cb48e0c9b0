"""
This package contains the generic repository implementations.

Repositories provide a clean abstraction layer for database access,
implementing the repository pattern to separate business logic from
data access concerns.
"""

from generic_repository.repositories.base import BaseRepository
from generic_repository.repositories.generic import GenericRepository
from generic_repository.repositories.async_generic import AsyncGenericRepository

__all__ = ['BaseRepository', 'GenericRepository', 'AsyncGenericRepository']
