"""
Database configuration and session management.

This module provides:
- Engine construction for SQLite (development, tests) and PostgreSQL
- Session factories for synchronous and asynchronous sessions
- Table creation for a declarative metadata
- Request-scoped session generators, usable as FastAPI dependencies

The session handed out here is the unit of work the repositories are built
on; committing it is left to the caller.
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator, Generator, Optional

from dotenv import load_dotenv
from sqlalchemy import Engine, MetaData, create_engine, event, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool, StaticPool

from generic_repository.models.base import Base
from generic_repository.utils.config import Settings, get_settings

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

def get_database_url(settings: Optional[Settings] = None) -> str:
    """
    Get the configured database URL.

    Args:
        settings (Settings, optional): Settings to read from. Defaults to the cached settings.

    Returns:
        str: Database connection URL
    """
    settings = settings or get_settings()
    # Fix potential newline issues in .env file
    return settings.DATABASE_URL.split('\n')[0].strip()

def to_async_url(database_url: str) -> str:
    """
    Convert a SQLite URL to its aiosqlite form.

    Other URLs are returned unchanged and must already name an async driver.
    """
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url

def is_sqlite_memory(database_url: str) -> bool:
    """Whether the URL names an in-memory SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return False
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"

def _engine_arguments(database_url: str, settings: Settings) -> dict:
    """Build dialect-specific engine keyword arguments."""
    engine_args = {
        "echo": settings.DEBUG,  # Only log SQL in debug mode
        "echo_pool": settings.DEBUG
    }

    if database_url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
        # An in-memory database lives and dies with its connection
        if is_sqlite_memory(database_url):
            engine_args["poolclass"] = StaticPool
            logger.info("Using StaticPool for in-memory SQLite database")
        else:
            engine_args["poolclass"] = NullPool
            logger.info("Using NullPool for SQLite database")

    elif database_url.startswith("postgresql"):
        engine_args.update({
            "pool_size": settings.POOL_SIZE,
            "max_overflow": settings.MAX_OVERFLOW,
            "pool_timeout": settings.POOL_TIMEOUT,
            "pool_recycle": settings.POOL_RECYCLE,
            "pool_pre_ping": True  # Verify connections before using them
        })
        logger.info(
            f"Using QueuePool for PostgreSQL database "
            f"(size={settings.POOL_SIZE}, max_overflow={settings.MAX_OVERFLOW})"
        )

    return engine_args

def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect", insert=True)
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def get_engine(database_url: Optional[str] = None, settings: Optional[Settings] = None) -> Engine:
    """
    Get a SQLAlchemy engine configured for the database type.

    Args:
        database_url (str, optional): Database URL. If None, taken from settings.
        settings (Settings, optional): Settings for echo and pool sizing.

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    settings = settings or get_settings()
    database_url = database_url or get_database_url(settings)

    engine_args = _engine_arguments(database_url, settings)
    if database_url.startswith("postgresql"):
        engine_args["poolclass"] = QueuePool

    engine = create_engine(database_url, **engine_args)
    if database_url.startswith("sqlite"):
        _enable_sqlite_foreign_keys(engine)

    return engine

def get_async_engine(database_url: Optional[str] = None,
                     settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Get an async SQLAlchemy engine configured for the database type.

    SQLite URLs are switched to the aiosqlite driver.

    Args:
        database_url (str, optional): Database URL. If None, taken from settings.
        settings (Settings, optional): Settings for echo and pool sizing.

    Returns:
        AsyncEngine: Configured async engine
    """
    settings = settings or get_settings()
    database_url = to_async_url(database_url or get_database_url(settings))

    engine = create_async_engine(database_url, **_engine_arguments(database_url, settings))
    if database_url.startswith("sqlite"):
        _enable_sqlite_foreign_keys(engine.sync_engine)

    return engine

def get_session_local(engine: Optional[Engine] = None) -> sessionmaker:
    """
    Get a session factory bound to the engine.

    Args:
        engine (Engine, optional): SQLAlchemy engine. If None, a new engine is created.

    Returns:
        sessionmaker: Session factory
    """
    if engine is None:
        engine = get_engine()
    return sessionmaker(bind=engine, class_=Session, autoflush=True)

def get_async_session_local(engine: Optional[AsyncEngine] = None) -> async_sessionmaker:
    """
    Get an async session factory bound to the engine.

    Args:
        engine (AsyncEngine, optional): Async engine. If None, a new engine is created.

    Returns:
        async_sessionmaker: Async session factory
    """
    if engine is None:
        engine = get_async_engine()
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False  # Loaded attributes stay usable after commit without I/O
    )

def init_db(engine: Engine, metadata: MetaData = Base.metadata) -> None:
    """Create all tables of the metadata that do not exist yet."""
    metadata.create_all(bind=engine)
    logger.info(f"Initialized database at {engine.url!r}")

async def init_async_db(engine: AsyncEngine, metadata: MetaData = Base.metadata) -> None:
    """Create all tables of the metadata that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info(f"Initialized database at {engine.url!r}")

@lru_cache()
def _default_session_local() -> sessionmaker:
    return get_session_local()

@lru_cache()
def _default_async_session_local() -> async_sessionmaker:
    return get_async_session_local()

def get_db() -> Generator[Session, None, None]:
    """
    Provide a database session for one unit of work.

    Yields:
        Session: SQLAlchemy database session, closed afterwards
    """
    db = _default_session_local()()
    try:
        yield db
    finally:
        db.close()

async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide an async database session for one unit of work.

    Yields:
        AsyncSession: A database session, closed afterwards
    """
    async with _default_async_session_local()() as session:
        yield session
