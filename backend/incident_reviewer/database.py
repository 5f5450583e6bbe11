"""Database engine and session configuration.

Only used when ``storage_backend`` is ``"postgres"``; the in-memory backend
never opens a connection. Engines are built from the application's settings
by ``create_app``, which owns them for the life of the app. Creating the
engine doesn't connect either, the first query does.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from incident_reviewer.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


def make_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for ``settings.database_url``."""
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def make_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory the SQL stores open their sessions from."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def close_engine(engine: AsyncEngine) -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()
    logger.info("Database connections closed")
