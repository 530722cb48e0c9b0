"""
Declarative base shared by applications using the repositories.
"""

from generic_repository.models.base import Base

__all__ = ['Base']
