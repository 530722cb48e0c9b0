"""
Pytest configuration and fixtures for testing.

Every test gets its own SQLite file under tmp_path so that separate sessions
use separate connections and only see committed data.
"""

from typing import Dict, List

import pytest
import pytest_asyncio
from sqlalchemy import event

from generic_repository.database import (
    get_async_engine,
    get_async_session_local,
    get_engine,
    get_session_local,
    init_async_db,
    init_db,
)
from generic_repository.utils.config import Settings
from tests.fixtures.models import Author, Book, Edition, Review

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database and log directory."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        LOG_DIR=str(tmp_path / "logs"),
        DEBUG=False,
    )

@pytest.fixture
def engine(test_settings):
    """Create the test engine with all tables."""
    engine = get_engine(settings=test_settings)
    init_db(engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_local(engine):
    return get_session_local(engine)

@pytest.fixture
def db_session(session_local):
    """Create a fresh database session for a test."""
    with session_local() as session:
        yield session

@pytest.fixture
def statements(engine) -> List[str]:
    """Record every SQL statement sent through the engine."""
    executed = []

    @event.listens_for(engine, "before_cursor_execute")
    def _record(conn, cursor, statement, parameters, context, executemany):
        executed.append(statement)

    yield executed
    event.remove(engine, "before_cursor_execute", _record)

@pytest.fixture
def seeded(session_local) -> Dict[str, int]:
    """
    Commit a small catalogue and return the author ids by name.

    Ada (1815): Notes
    Borges (1899): Ficciones (reviews 5, 4; editions 1, 2), El Aleph
    Christie (1890): Poirot
    """
    with session_local() as session:
        ficciones = Book(
            title="Ficciones",
            reviews=[Review(rating=5), Review(rating=4)],
            editions=[Edition(number=1, year=1944), Edition(number=2, year=1956)],
        )
        authors = [
            Author(name="Ada", born=1815, books=[Book(title="Notes")]),
            Author(name="Borges", born=1899, books=[ficciones, Book(title="El Aleph")]),
            Author(name="Christie", born=1890, books=[Book(title="Poirot")]),
        ]
        session.add_all(authors)
        session.commit()
        return {author.name: author.id for author in authors}

@pytest_asyncio.fixture
async def async_engine(test_settings, engine):
    """Async engine on the same database file; tables come from the sync engine."""
    async_engine = get_async_engine(settings=test_settings)
    await init_async_db(async_engine)
    yield async_engine
    await async_engine.dispose()

@pytest_asyncio.fixture
async def async_session_local(async_engine):
    return get_async_session_local(async_engine)

@pytest_asyncio.fixture
async def async_db_session(async_session_local):
    async with async_session_local() as session:
        yield session
