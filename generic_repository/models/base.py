"""
Base model configuration for SQLAlchemy ORM.

The repositories work with any mapped class; this declarative base is only
provided for applications that do not already have one.

Usage:
    from generic_repository.models.base import Base

    class Author(Base):
        __tablename__ = "authors"

        id = Column(Integer, primary_key=True)
        name = Column(String)
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
